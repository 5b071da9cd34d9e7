"""
Tests for the login-form heuristic.
"""

import pytest

from app.features.crawl.services.document_analyzer import parse_document
from app.features.crawl.services.login_form import attribute_text, is_login_form


def form_of(markup: str):
    return parse_document(markup.encode("utf-8")).form


@pytest.mark.parametrize(
    "markup",
    [
        '<form id="loginForm"></form>',
        '<form class="signin-box"></form>',
        '<form name="OAuth"></form>',
    ],
)
def test_form_attributes_alone_are_enough(markup):
    assert is_login_form(form_of(markup)) is True


def test_password_with_email_input():
    markup = '<form><input type="email" name="email"><input type="password" name="pw"></form>'
    assert is_login_form(form_of(markup)) is True


def test_password_with_username_text_input_by_id():
    markup = '<form><input type="TEXT" id="UserName"><input type="Password"></form>'
    assert is_login_form(form_of(markup)) is True


def test_password_alone_is_not_enough():
    assert is_login_form(form_of('<form><input type="password"></form>')) is False


def test_identity_field_without_password_is_not_enough():
    assert is_login_form(form_of('<form><input type="email" name="email"></form>')) is False


def test_identity_input_must_mention_user_email_or_login():
    markup = '<form><input type="text" name="q"><input type="password"></form>'
    assert is_login_form(form_of(markup)) is False


def test_hidden_input_does_not_count_as_identity():
    markup = '<form><input type="hidden" name="username"><input type="password"></form>'
    assert is_login_form(form_of(markup)) is False


def test_attribute_text_missing_attribute():
    assert attribute_text(form_of("<form></form>"), "class") == ""


def test_password_with_user_email_field():
    markup = '<form><input type="password"><input type="email" name="user_email"></form>'
    assert is_login_form(form_of(markup)) is True
