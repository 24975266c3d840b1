from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from apirunner.models.context import RequestContext
from apirunner.models.operation import ResponseValidationResult, ValidationIssue
from apirunner.services.response_validator import validate_response
from conftest import FakeRequest, FakeResponse, make_operation


def _setup(validate):
    operation = make_operation(validate_response=validate)
    context = RequestContext(FakeRequest(), FakeResponse(), api=None, operation=operation)
    return operation, context


@pytest.mark.asyncio
async def test_skipped_without_callback():
    validate = MagicMock()
    operation, context = _setup(validate)

    assert await validate_response(operation, context, None, True) is None
    validate.assert_not_called()


@pytest.mark.asyncio
async def test_callback_invoked_once_with_issues():
    issues = [ValidationIssue(message="status not declared")]
    validate = MagicMock(return_value=ResponseValidationResult(errors=issues))
    callback = MagicMock()
    operation, context = _setup(validate)

    result = await validate_response(operation, context, callback, False)

    validate.assert_called_once_with(context.res, False)
    callback.assert_called_once_with(result)
    assert result.errors == issues


@pytest.mark.asyncio
async def test_callback_not_invoked_without_issues():
    callback = MagicMock()
    operation, context = _setup(lambda res, defaults: {"errors": []})

    result = await validate_response(operation, context, callback, True)

    assert result == {"errors": []}
    callback.assert_not_called()


@pytest.mark.asyncio
async def test_async_validator_and_mapping_result():
    async def validate(res, defaults):
        return {"errors": [{"message": "bad body", "location": "body"}]}

    calls = []

    async def callback(result):
        calls.append(result)

    operation, context = _setup(validate)

    await validate_response(operation, context, callback, True)

    assert calls == [{"errors": [{"message": "bad body", "location": "body"}]}]


@pytest.mark.asyncio
async def test_callback_failure_gets_status_500():
    def callback(result):
        raise RuntimeError("invalid response")

    operation, context = _setup(lambda res, defaults: {"errors": [{"message": "x"}]})

    with pytest.raises(RuntimeError) as exc_info:
        await validate_response(operation, context, callback, True)
    assert exc_info.value.status == 500


@pytest.mark.asyncio
async def test_callback_failure_keeps_its_status():
    err = RuntimeError("upstream")
    err.status = 502

    def callback(result):
        raise err

    operation, context = _setup(lambda res, defaults: {"errors": [{"message": "x"}]})

    with pytest.raises(RuntimeError):
        await validate_response(operation, context, callback, True)
    assert err.status == 502


@pytest.mark.asyncio
async def test_response_is_not_mutated():
    operation, context = _setup(lambda res, defaults: {"errors": [{"message": "x"}]})
    context.res.set_status(201).set_header("x-a", "1").set_body("body")

    await validate_response(operation, context, lambda result: None, True)

    assert context.res.status_code == 201
    assert context.res.headers == {"x-a": "1"}
    assert context.res.body == "body"


@pytest.mark.asyncio
async def test_issues_without_message_reach_callback_unchanged():
    returned = {"errors": [{"type": "error", "location": {"in": "response"}, "msg": "bad"}]}
    callback = MagicMock()
    operation, context = _setup(lambda res, defaults: returned)

    result = await validate_response(operation, context, callback, True)

    callback.assert_called_once()
    assert callback.call_args.args[0] is returned
    assert result is returned


@pytest.mark.asyncio
async def test_attribute_style_result_is_supported():
    returned = SimpleNamespace(errors=[{"message": "bad", "docPath": "/responses/200"}])
    callback = MagicMock()
    operation, context = _setup(lambda res, defaults: returned)

    await validate_response(operation, context, callback, True)

    callback.assert_called_once_with(returned)


@pytest.mark.asyncio
async def test_attribute_style_result_without_errors_skips_callback():
    callback = MagicMock()
    operation, context = _setup(lambda res, defaults: SimpleNamespace(errors=None))

    await validate_response(operation, context, callback, True)

    callback.assert_not_called()


def test_validation_issue_keeps_extra_fields():
    issue = ValidationIssue(message="bad", location="body", type="error", docPath="/x")

    assert issue.model_dump() == {
        "message": "bad",
        "location": "body",
        "type": "error",
        "docPath": "/x",
    }
