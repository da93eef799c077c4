"""Core application for the Onconet backend.

This package contains the entity store (memory and database backends),
serializers, views and route registrations implementing the API used by
the web client.
"""
