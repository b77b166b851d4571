from shipyard.resources.base import BaseResource


class HorizontalPodAutoscalerResource(BaseResource):
    """HorizontalPodAutoscaler targeting an app's Deployment."""

    KIND = "HorizontalPodAutoscaler"
