import os
import sys
import threading

import pytest

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from core.mover import MoverConfig, MoverLoop, MoverState
from core.pointer import Pointer
from core.service_interface import ServiceInterface
from core.service_manager import ServiceManager, ServiceState


class DummyService(ServiceInterface):
    def __init__(self):
        self.stop_called = 0
        self._stop = threading.Event()

    def start(self):
        self._stop.wait(5)

    def stop(self):
        self.stop_called += 1
        self._stop.set()


class CrashingService(ServiceInterface):
    def start(self):
        raise RuntimeError("boom")

    def stop(self):
        return


class StaticPointer(Pointer):
    def get_position(self):
        return (0, 0)

    def set_position(self, x, y):
        return


@pytest.fixture
def manager():
    return ServiceManager(join_timeout=2)


def wait_for_state(manager, name, state, timeout=2.0):
    pause = threading.Event()
    for _ in range(int(timeout / 0.01)):
        if manager.get_service_state(name) == state:
            return True
        pause.wait(0.01)
    return manager.get_service_state(name) == state


def test_register_sets_stopped_state(manager):
    manager.register_service('dummy', DummyService())
    assert manager.get_service_state('dummy') == ServiceState.STOPPED
    assert manager.get_service_state('missing') is None


def test_start_and_stop_service(manager):
    service = DummyService()
    manager.register_service('dummy', service)

    manager.start_service('dummy')
    assert wait_for_state(manager, 'dummy', ServiceState.RUNNING)

    manager.stop_service('dummy')
    assert service.stop_called == 1
    assert manager.get_service_state('dummy') == ServiceState.STOPPED


def test_crashing_service_is_marked_failed(manager, caplog):
    manager.register_service('crash', CrashingService())
    manager.start_service('crash')

    assert wait_for_state(manager, 'crash', ServiceState.FAILED)
    assert "Service 'crash' failed: boom" in caplog.text


def test_stop_unknown_or_idle_service_is_noop(manager, caplog):
    manager.stop_service('missing')
    manager.register_service('dummy', DummyService())
    manager.stop_service('dummy')

    assert "Service 'missing' not registered." in caplog.text
    assert "Service 'dummy' is not running." in caplog.text


def test_mover_runs_as_service(manager):
    cancel = threading.Event()
    mover = MoverLoop(MoverConfig(interval=3600), StaticPointer(), cancel)
    manager.register_service('mover', mover)

    manager.start_service('mover')
    assert wait_for_state(manager, 'mover', ServiceState.RUNNING)
    manager.stop_service('mover')

    assert cancel.is_set()
    assert mover.done
    assert mover.state == MoverState.STOPPED
    assert manager.get_service_state('mover') == ServiceState.STOPPED
