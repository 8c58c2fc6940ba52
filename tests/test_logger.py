import json
import logging

from careerflow.utils import CareerFlowLogger, StructuredFormatter


def test_structured_formatter_includes_context_fields():
    record = logging.LogRecord("careerflow.storage", logging.WARNING, __file__, 1,
                               "Remote load failed", None, None)
    record.extra_fields = {"table": "jobs"}

    entry = json.loads(StructuredFormatter().format(record))

    assert entry["level"] == "WARNING"
    assert entry["logger"] == "careerflow.storage"
    assert entry["message"] == "Remote load failed"
    assert entry["table"] == "jobs"


def test_context_logger_attaches_fields(caplog):
    logger = CareerFlowLogger("careerflow.test")
    logger.set_context(collection="career_jobs")

    with caplog.at_level(logging.INFO, logger="careerflow.test"):
        logger.info("Loaded", count=3)

    (record,) = caplog.records
    assert record.extra_fields == {"collection": "career_jobs", "count": 3}
