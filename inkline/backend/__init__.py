# InkLine backend service
