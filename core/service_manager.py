import enum
import logging
import threading
from typing import Dict, Optional

from utils.i18n import _
from .service_interface import ServiceInterface


class ServiceState(enum.Enum):
    """Enumeration for the state of a background service."""
    STOPPED = "STOPPED"
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"
    FAILED = "FAILED"


class ServiceManager:
    """
    Manager for background services within the application.
    Each service runs its blocking start() on a dedicated daemon thread.
    """

    def __init__(self, join_timeout: float = 5.0):
        self._services: Dict[str, ServiceInterface] = {}
        self._service_states: Dict[str, ServiceState] = {}
        self._service_threads: Dict[str, threading.Thread] = {}
        self._join_timeout = join_timeout
        self._logger = logging.getLogger(self.__class__.__name__)

    def register_service(self, name: str, service: ServiceInterface):
        """Registers a new service with the manager."""
        self._logger.info(f"Registering service: {name}")
        self._services[name] = service
        self._service_threads.pop(name, None)
        self._service_states[name] = ServiceState.STOPPED

    def start_service(self, name: str):
        """Starts a registered service in a separate thread."""
        if name not in self._services:
            self._logger.error(f"Service '{name}' not registered.")
            return

        if self._service_states.get(name) in [
                ServiceState.RUNNING, ServiceState.STARTING
        ]:
            self._logger.warning(
                f"Service '{name}' is already running or starting.")
            return

        if name in self._service_threads and self._service_threads[
                name].is_alive():
            self._logger.warning(
                f"Service thread for '{name}' is still alive. Cannot start.")
            return

        self._set_state(name, ServiceState.STARTING)
        thread = threading.Thread(target=self._run_service,
                                  args=(name, ),
                                  name=f"service-{name}",
                                  daemon=True)
        self._service_threads[name] = thread
        thread.start()

    def stop_service(self, name: str):
        """Stops a running service and waits for its thread to exit."""
        if name not in self._services:
            self._logger.error(f"Service '{name}' not registered.")
            return

        if self._service_states.get(name) not in [
                ServiceState.RUNNING, ServiceState.STARTING
        ]:
            self._logger.warning(f"Service '{name}' is not running.")
            return

        self._set_state(name, ServiceState.STOPPING)
        service = self._services[name]
        try:
            service.stop()
        except Exception as e:
            self._logger.error(f"Error stopping service '{name}': {e}")
            self._set_state(name, ServiceState.FAILED)
            return

        thread = self._service_threads.get(name)
        if thread is not None and thread.is_alive():
            thread.join(timeout=self._join_timeout)
            if thread.is_alive():
                self._logger.warning(
                    f"Service thread for '{name}' did not exit within "
                    f"{self._join_timeout} seconds.")

        if self._service_states.get(name) != ServiceState.FAILED:
            self._set_state(name, ServiceState.STOPPED)

    def get_service_state(self, name: str) -> Optional[ServiceState]:
        """Returns the current state of a service."""
        return self._service_states.get(name)

    def _run_service(self, name: str):
        """The target function for the service thread."""
        service = self._services[name]
        try:
            self._logger.info(_('service_starting').format(name=name))
            self._set_state(name, ServiceState.RUNNING)
            service.start()  # This is a blocking call
        except Exception as e:
            self._logger.error(f"Service '{name}' failed: {e}", exc_info=True)
            self._set_state(name, ServiceState.FAILED)
        finally:
            # start() returned on its own, e.g. after a graceful shutdown
            if self._service_states[name] == ServiceState.RUNNING:
                self._set_state(name, ServiceState.STOPPED)

    def _set_state(self, name: str, state: ServiceState):
        """Sets the state of a service and logs the change."""
        if self._service_states.get(name) == state:
            return
        self._service_states[name] = state
        self._logger.debug(f"Service '{name}' state changed to {state.value}")
