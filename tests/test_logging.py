import logging

from birthday_wisher.core.logging import AddressRedactingFilter


def test_filter_redacts_addresses_in_message(caplog):
    logger = logging.getLogger("test.redact")
    logger.setLevel(logging.INFO)
    logger.filters = []
    logger.addFilter(AddressRedactingFilter())

    with caplog.at_level(logging.INFO, logger="test.redact"):
        logger.info("Birthday email sent to ada.lovelace@example.com")

    assert "ada.lovelace@example.com" not in caplog.text
    assert "[REDACTED]" in caplog.text


def test_filter_redacts_addresses_in_args_and_keeps_ids(caplog):
    logger = logging.getLogger("test.redact_args")
    logger.setLevel(logging.INFO)
    logger.filters = []
    logger.addFilter(AddressRedactingFilter())

    with caplog.at_level(logging.INFO, logger="test.redact_args"):
        logger.info("Recipient %s at %s failed after %d attempt", "id-ada", "ada@example.com", 1)

    assert "ada@example.com" not in caplog.text
    assert "Recipient id-ada at [REDACTED] failed after 1 attempt" in caplog.text


def test_filter_keeps_message_ids_visible(caplog):
    logger = logging.getLogger("test.redact_ids")
    logger.setLevel(logging.INFO)
    logger.filters = []
    logger.addFilter(AddressRedactingFilter())

    with caplog.at_level(logging.INFO, logger="test.redact_ids"):
        logger.info("Sent to %s (message id %s)", "ada@example.com", "<1792405.42.7@birthday-wisher.local>")

    assert "ada@example.com" not in caplog.text
    assert "Sent to [REDACTED] (message id <1792405.42.7@birthday-wisher.local>)" in caplog.text


def test_log_notifier_delivery_id_survives_redaction(caplog):
    from birthday_wisher.notification.notifier import LogNotifier

    logger = logging.getLogger("birthday_wisher.notification.notifier")
    redactor = AddressRedactingFilter()
    logger.addFilter(redactor)
    try:
        with caplog.at_level(logging.INFO, logger="birthday_wisher.notification.notifier"):
            delivery_id = LogNotifier().send("ada@example.com", "Ada")
    finally:
        logger.removeFilter(redactor)

    assert delivery_id in caplog.text
    assert "ada@example.com" not in caplog.text
    assert "<[REDACTED]>" not in caplog.text
