"""Bootstrap an EC2 instance into an existing EKS cluster."""

__version__ = "0.1.0"
