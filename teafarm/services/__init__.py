"""
Client-side services: REST client, credential storage, navigation, CSV export.
"""
