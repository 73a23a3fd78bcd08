"""Routers FastAPI, un module par groupe d'endpoints."""
