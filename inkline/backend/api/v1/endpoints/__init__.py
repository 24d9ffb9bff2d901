# v1 endpoint modules
