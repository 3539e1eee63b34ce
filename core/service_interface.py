class ServiceInterface:
    """Abstract base class for a manageable background service."""

    def start(self):
        """Starts the service. This is a blocking call."""
        raise NotImplementedError

    def stop(self):
        """Stops the service and waits for start() to return."""
        raise NotImplementedError
