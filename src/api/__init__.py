"""FastAPI application module for CartRec.

This module contains the FastAPI application, route handlers, and API
endpoints for the recommendation service. It provides RESTful interfaces
for requesting cart-based recommendations and inspecting service status.
"""
