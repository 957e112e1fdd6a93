# tests/test_services/test_email_service.py
from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest
import requests

from core.schemas import ContactForm
from core.services.email_service import (
    AUTO_REPLY_SUBJECT, RESEND_API_URL, EmailDeliveryError, EmailNotConfigured, EmailService,
)


@pytest.fixture
def settings(test_settings):
    return replace(test_settings, resend_api_key="re_test", support_email="support@example.com",
                   email_from="Book Assembly <noreply@example.com>")


@pytest.fixture
def form():
    return ContactForm(name="Ann <b>", email="ann@example.com", subject="bug",
                       message="The dashboard\nis empty")


def ok_response(message_id="msg_1"):
    response = MagicMock()
    response.json.return_value = {"id": message_id}
    return response


def test_missing_api_key(test_settings):
    with pytest.raises(EmailNotConfigured):
        EmailService(test_settings)


@patch("core.services.email_service.requests.post")
def test_send_posts_to_resend(mock_post, settings):
    mock_post.return_value = ok_response("abc")
    assert EmailService(settings).send("to@example.com", "Hi", "text", "<p>text</p>") == "abc"

    args, kwargs = mock_post.call_args
    assert args == (RESEND_API_URL,)
    assert kwargs["headers"] == {"Authorization": "Bearer re_test"}
    assert kwargs["json"]["to"] == ["to@example.com"]
    assert "reply_to" not in kwargs["json"]


@patch("core.services.email_service.requests.post")
def test_send_wraps_request_errors(mock_post, settings):
    mock_post.side_effect = requests.ConnectionError("offline")
    with pytest.raises(EmailDeliveryError):
        EmailService(settings).send("to@example.com", "Hi", "text", "<p>text</p>")


@patch("core.services.email_service.requests.post")
def test_contact_message_and_auto_reply(mock_post, settings, form):
    mock_post.return_value = ok_response()
    EmailService(settings).send_contact_message(form)

    assert mock_post.call_count == 2
    support = mock_post.call_args_list[0].kwargs["json"]
    assert support["to"] == ["support@example.com"]
    assert support["reply_to"] == "ann@example.com"
    assert support["subject"] == "[Bug Report] from Ann <b>"
    assert "Ann &lt;b&gt;" in support["html"]
    assert "The dashboard<br />is empty" in support["html"]

    reply = mock_post.call_args_list[1].kwargs["json"]
    assert reply["to"] == ["ann@example.com"]
    assert reply["subject"] == AUTO_REPLY_SUBJECT


@patch("core.services.email_service.requests.post")
def test_auto_reply_failure_is_not_fatal(mock_post, settings, form):
    failing = MagicMock()
    failing.raise_for_status.side_effect = requests.HTTPError("422")
    mock_post.side_effect = [ok_response(), failing]

    EmailService(settings).send_contact_message(form)
    assert mock_post.call_count == 2


@patch("core.services.email_service.requests.post")
def test_support_message_failure_propagates(mock_post, settings, form):
    mock_post.side_effect = requests.Timeout("slow")
    with pytest.raises(EmailDeliveryError):
        EmailService(settings).send_contact_message(form)
    assert mock_post.call_count == 1
