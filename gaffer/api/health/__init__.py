"""Health probe resources.

Usage
-----
Import health resources for route registration::

    from gaffer.api.health.resources import HealthResource, ReadyResource
"""
