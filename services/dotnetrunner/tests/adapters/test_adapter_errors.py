from dotnetrunner.adapters.errors import CommandNotFound, CommandTimeout


def test_adapter_error_has_message_and_details():
    err = CommandNotFound("no dotnet", details={"tool": "dotnet"}, hint="install it")
    assert "no dotnet" in str(err)
    assert err.details["tool"] == "dotnet"
    assert err.hint == "install it"


def test_adapter_error_is_an_exception_with_cause():
    cause = TimeoutError()
    err = CommandTimeout("too slow", cause=cause)
    assert isinstance(err, Exception)
    assert err.cause is cause
