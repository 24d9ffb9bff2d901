# Business logic layer
