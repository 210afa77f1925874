from __future__ import annotations

import pytest
from pydantic import ValidationError

from staffbot.core.config import Settings
from staffbot.models.employee import Employee
from staffbot.models.message import IncomingMessage


class TestIncomingMessage:
    def test_session_prefers_user(self):
        message = IncomingMessage(user_id=1, chat_id=2, text="привет")
        assert message.session_id == "1"
        assert message.rate_limit_key == "rate_limit:1"

    def test_session_falls_back_to_chat(self):
        message = IncomingMessage(chat_id=2, text="привет")
        assert message.session_id == "2"
        assert message.rate_limit_key == "rate_limit:2"

    def test_anonymous(self):
        message = IncomingMessage(text="привет")
        assert message.session_id == "global"
        assert message.rate_limit_key == "rate_limit:anonymous"

    def test_text_length_is_bounded(self):
        with pytest.raises(ValidationError):
            IncomingMessage(text="x" * 4097)


class TestEmployee:
    def test_birthday_needs_day_and_month(self):
        assert Employee(id="1", birthday_day=5, birthday_month=3).birthday == "5.3"
        assert Employee(id="1", birthday_day=5).birthday is None

    def test_full_name(self):
        assert Employee(id="1", first_name="Иван", last_name="Петров").full_name == "Иван Петров"
        assert Employee(id="1", first_name="Иван").full_name == "Иван"


class TestSettings:
    def test_admin_user_ids(self):
        assert Settings(ADMIN_USER_IDS="1, 2,abc,,-3").admin_user_ids == {1, 2, -3}

    def test_timeouts_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(STORE_TIMEOUT_SECONDS=0)

    def test_cosmos_configured(self):
        assert Settings(COSMOS_DB_ENDPOINT="https://x", COSMOS_DB_KEY="k").cosmos_configured is True
        assert Settings(COSMOS_DB_ENDPOINT="", COSMOS_DB_KEY="").cosmos_configured is False
