"""GitLab webhook resources.

Usage
-----
Import the webhook resource for route registration::

    from gaffer.api.webhooks.resources import GitLabWebhookResource
"""
