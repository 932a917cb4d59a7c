"""
Domain services. Every function takes the database session and, for tenant
data, the caller's SessionContext as explicit arguments.
"""
