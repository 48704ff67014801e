import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_document_id_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "document_id": "DOC12345678"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["document_id"] == "***5678"

    def test_email_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "email": "john.doe@example.com"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "john.doe" not in result["email"]
        assert result["email"].startswith("***")

    def test_phone_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "phone": "+1234567890"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["phone"] == "***7890"

    def test_short_value_fully_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "phone": "1234"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["phone"] == "***"

    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_non_string_values_untouched(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "status_code": 404}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["status_code"] == 404

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "customer.created", "customer_id": "0190a1b2-0000"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["customer_id"] == "0190a1b2-0000"
        assert result["event"] == "customer.created"
