"""
FastAPI routers for all API endpoints.

Each module defines a router for one area (auth, users, equipment, health).
Request input is validated by validate() dependencies before handlers run.
"""
