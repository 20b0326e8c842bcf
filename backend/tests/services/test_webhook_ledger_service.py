from portfolio.services.webhook_ledger_service import WebhookLedgerService


def _log(service, event_id="msg_1", event_type="user.created"):
    return service.log_received(
        source="clerk", event_type=event_type, payload={"type": event_type}, event_id=event_id
    )


def test_log_received_creates_row(db):
    service = WebhookLedgerService(db)

    event = _log(service)

    assert event.status == "received"
    assert event.retry_count == 0
    assert service.find_existing(source="clerk", event_id="msg_1") is event
    assert service.find_existing(source="clerk", event_id=None) is None


def test_redelivery_bumps_retry_count(db):
    service = WebhookLedgerService(db)
    first = _log(service)

    again = _log(service)

    assert again.id == first.id
    assert again.retry_count == 1


def test_already_handled_only_for_terminal_statuses(db):
    service = WebhookLedgerService(db)
    event = _log(service)
    assert not service.already_handled(event)
    assert not service.already_handled(None)

    service.mark_processed(event, related_user_id="user_1", duration_ms=12)
    assert service.already_handled(event)
    assert event.related_user_id == "user_1"

    ignored = _log(service, event_id="msg_2", event_type="session.created")
    service.mark_processed(ignored, status="ignored")
    assert service.already_handled(ignored)


def test_mark_failed_truncates_error(db):
    service = WebhookLedgerService(db)
    event = _log(service)

    service.mark_failed(event, error="x" * 5000, duration_ms=3)

    assert event.status == "failed"
    assert len(event.processing_error) == 2000
    assert not service.already_handled(event)


def test_list_events_filters_by_status(db):
    service = WebhookLedgerService(db)
    processed = _log(service, event_id="a")
    service.mark_processed(processed)
    _log(service, event_id="b")
    db.commit()

    assert [e.event_id for e in service.list_events(status="processed")] == ["a"]
    assert len(service.list_events(source="clerk")) == 2
