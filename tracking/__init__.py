"""Tracking application for the medical equipment backend.

This package contains the models, serializers, views, realtime consumers
and route registrations behind the equipment tracking API.
"""
