"""Staff attendance backend.

Feature modules (attendance, recap, geofence, holidays, users, ...) expose
service/repository layers; a thin Flask controller layer sits on top.
"""
