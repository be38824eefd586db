"""Tests for compose templates."""

import pytest

from nexusmail.errors import NotFound, ValidationError
from nexusmail.models import EVERYONE, MessageKind, Priority

from .conftest import ADMIN, ALICE


@pytest.mark.asyncio
async def test_save_and_list_by_name(templates):
    await templates.save("Weekly update", "Week {n}", "Summary...", Priority.NORMAL)
    await templates.save("Alert", "Outage", "We are investigating", Priority.HIGH)
    names = [t.name for t in await templates.list()]
    assert names == ["Alert", "Weekly update"]


@pytest.mark.asyncio
async def test_save_requires_fields(templates):
    with pytest.raises(ValidationError):
        await templates.save("", "Subject", "Body")
    with pytest.raises(ValidationError):
        await templates.save("Name", "Subject", "  ")
    assert await templates.list() == []


@pytest.mark.asyncio
async def test_delete(templates):
    template = await templates.save("Alert", "Outage", "Investigating")
    await templates.delete(template.id)
    assert await templates.list() == []
    with pytest.raises(NotFound):
        await templates.delete(template.id)


@pytest.mark.asyncio
async def test_compose_copies_fields(templates, mailbox):
    template = await templates.save("Alert", "Outage", "Investigating", Priority.HIGH)

    message = await templates.compose_from(template.id, ADMIN, EVERYONE, kind=MessageKind.BROADCAST)

    assert message.subject == "Outage"
    assert message.content == "Investigating"
    assert message.priority == Priority.HIGH
    # no live link: deleting the template keeps the message
    await templates.delete(template.id)
    assert [m.id for m in await mailbox.list_for(ALICE)] == [message.id]


@pytest.mark.asyncio
async def test_compose_unknown_template(templates):
    with pytest.raises(NotFound):
        await templates.compose_from("missing", ADMIN, ALICE)
