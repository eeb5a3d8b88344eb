"""Notification and urgency engine for the personal finance tracker.

The subpackages follow the usual layering: ``domain`` holds plain entities,
``infrastructure`` the SQLAlchemy persistence and websocket delivery,
``application`` the preference, dispatch and scanning use cases and
``interfaces`` the FastAPI surface.
"""
