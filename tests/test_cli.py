from farmassist.services.provider import ProviderAuthError


def test_ask_prints_advice(app, provider):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["ask", "What pesticide should I use for rice blast?"])
    assert result.exit_code == 0
    assert "[remote / gemini/gemini-1.5-pro / english]" in result.output
    assert "Topics: pests" in result.output
    assert "Use X fungicide" in result.output


def test_ask_passes_location_and_crop(app, provider, weather):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["ask", "Weather this week?", "--location", "Pune", "--crop", "wheat"])
    assert result.exit_code == 0
    assert weather.calls == ["Pune"]
    assert "Crop: wheat" in provider.calls[0].user


def test_ask_rejects_blank_query(app):
    result = app.test_cli_runner().invoke(args=["ask", "  "])
    assert result.exit_code == 2
    assert "Query is required" in result.output


def test_check_provider_without_key(app):
    result = app.test_cli_runner().invoke(args=["check-provider"])
    assert result.exit_code == 1
    assert "GEMINI_API_KEY not configured" in result.output


def test_check_provider_success(app, provider):
    app.config["GEMINI_API_KEY"] = "AIzaTestKey123"
    result = app.test_cli_runner().invoke(args=["check-provider"])
    assert result.exit_code == 0
    assert "AIzaT***" in result.output
    assert "AIzaTestKey123" not in result.output
    assert "Provider is available." in result.output
    assert provider.pings == 1


def test_check_provider_failure(app, provider):
    app.config["GEMINI_API_KEY"] = "AIzaTestKey123"
    provider.ping_error = ProviderAuthError("API key not valid", 400)
    result = app.test_cli_runner().invoke(args=["check-provider"])
    assert result.exit_code == 1
    assert "auth: API key not valid" in result.output


def test_list_models(app):
    result = app.test_cli_runner().invoke(args=["list-models"])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["gemini-1.5-pro", "gemini-1.5-flash"]
