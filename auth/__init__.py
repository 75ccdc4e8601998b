"""
auth — User authentication module.

Provides:
  • JWT creation & verification (HS256)
  • Password hashing (bcrypt)
  • Register / Login API routes
  • ``require_user`` FastAPI dependency for protected routes
"""
