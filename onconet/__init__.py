"""Django project package for the Onconet backend (settings, URLs, WSGI/ASGI)."""
