"""Falcon HTTP API for Gaffer.

Usage
-----
Create the app with dependencies::

    from gaffer.api.app import AppDependencies, create_app

    app = create_app(AppDependencies(router=router, sink=sink, gitlab_client=client))
"""
