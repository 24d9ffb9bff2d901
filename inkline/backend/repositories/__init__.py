# Data access layer
