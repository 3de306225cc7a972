import sys
from pathlib import Path
from types import SimpleNamespace

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from azurequeue_transport.modules.storagequeue.errors import ConfigurationError
from azurequeue_transport.modules.storagequeue.options import QueueOptions


def test_defaults():
    options = QueueOptions.from_mapping(None)
    assert options.queue_name == ""
    assert options.visibility_timeout is None
    assert options.results_limit == 1
    assert options.time_to_live is None
    assert options.body_only is False


def test_from_mapping():
    options = QueueOptions.from_mapping(
        {"queue_name": "orders", "visibility_timeout": 30, "results_limit": 10, "time_to_live": -1, "body_only": True}
    )
    assert options == QueueOptions("orders", 30, 10, -1, True)


@pytest.mark.parametrize(
    "mapping",
    [
        {"queue": "typo"},
        {"results_limit": 0},
        {"results_limit": 33},
        {"results_limit": "5"},
        {"results_limit": True},
        {"visibility_timeout": -1},
        {"time_to_live": 0},
        {"time_to_live": -2},
        {"body_only": "true"},
        {"queue_name": None},
    ],
)
def test_invalid_options(mapping):
    with pytest.raises(ConfigurationError):
        QueueOptions.from_mapping(mapping)


def test_require_queue_name():
    assert QueueOptions(queue_name=" orders ").require_queue_name() == "orders"
    with pytest.raises(ConfigurationError):
        QueueOptions(queue_name="   ").require_queue_name()


def test_from_settings():
    settings = SimpleNamespace(
        AZURE_QUEUE_NAME=" jobs ",
        AZURE_QUEUE_VISIBILITY_TIMEOUT=45,
        AZURE_QUEUE_RESULTS_LIMIT=4,
        AZURE_QUEUE_TIME_TO_LIVE=None,
        AZURE_QUEUE_BODY_ONLY=True,
    )
    assert QueueOptions.from_settings(settings) == QueueOptions("jobs", 45, 4, None, True)
