"""Tests for the mailbox: send, read state, recall, filters and unread counts."""

from datetime import datetime, timedelta, timezone

import pytest

from nexusmail.errors import NotFound, PermissionDenied, ValidationError
from nexusmail.models import EVERYONE, MessageFilter, MessageKind, Priority

from .conftest import ADMIN, ALICE, BOB


async def _broadcast(mailbox, subject="Maintenance", content="Saturday 2:00 AM UTC", **kwargs):
    return await mailbox.send(
        ADMIN, EVERYONE, subject, content,
        kind=MessageKind.BROADCAST, priority=kwargs.pop("priority", Priority.HIGH), **kwargs,
    )


async def _personal(mailbox, recipient=ALICE, subject="Welcome", content="Hi there", **kwargs):
    return await mailbox.send(ADMIN, recipient, subject, content, kind=MessageKind.PERSONAL, **kwargs)


async def _assert_unread_consistent(mailbox, actors=(ADMIN, ALICE, BOB)):
    for actor in actors:
        unread = await mailbox.list_for(actor, MessageFilter.UNREAD)
        assert await mailbox.unread_count(actor) == len(unread)


# --- send ---


@pytest.mark.asyncio
async def test_send_assigns_defaults(mailbox):
    msg = await _personal(mailbox, tags=[" Onboarding ", "", "Onboarding"])
    assert msg.id
    assert msg.is_read is False
    assert msg.is_starred is False
    assert msg.created_at.tzinfo is not None
    assert msg.tags == frozenset({"Onboarding"})


@pytest.mark.asyncio
@pytest.mark.parametrize("subject,content", [("", "body"), ("   ", "body"), ("Subject", ""), ("Subject", "\n")])
async def test_send_rejects_empty_fields(mailbox, subject, content):
    with pytest.raises(ValidationError):
        await mailbox.send(ADMIN, ALICE, subject, content)
    assert await mailbox.list_for(ALICE) == []


@pytest.mark.asyncio
async def test_send_rejects_unknown_recipient_and_sender(mailbox):
    with pytest.raises(ValidationError):
        await mailbox.send(ADMIN, "ghost", "Hi", "there")
    with pytest.raises(ValidationError):
        await mailbox.send("ghost", ALICE, "Hi", "there")


@pytest.mark.asyncio
async def test_kind_must_match_recipient(mailbox):
    with pytest.raises(ValidationError):
        await mailbox.send(ADMIN, ALICE, "Hi", "there", kind=MessageKind.BROADCAST)
    with pytest.raises(ValidationError):
        await mailbox.send(ADMIN, EVERYONE, "Hi", "there", kind=MessageKind.PERSONAL)


@pytest.mark.asyncio
async def test_members_cannot_broadcast(mailbox):
    with pytest.raises(PermissionDenied):
        await mailbox.send(ALICE, EVERYONE, "Hi", "all", kind=MessageKind.BROADCAST)
    with pytest.raises(PermissionDenied):
        await mailbox.send(ALICE, BOB, "Hi", "bob", kind=MessageKind.SYSTEM)


@pytest.mark.asyncio
async def test_member_can_send_personal(mailbox):
    msg = await mailbox.send(ALICE, BOB, "Lunch?", "12:30 at the usual place")
    assert [m.id for m in await mailbox.list_for(BOB)] == [msg.id]


@pytest.mark.asyncio
async def test_scheduled_message_stored_immediately(mailbox):
    later = datetime.now(timezone.utc) + timedelta(days=1)
    msg = await _personal(mailbox, scheduled_for=later)
    listed = await mailbox.list_for(ALICE)
    assert [m.id for m in listed] == [msg.id]
    assert listed[0].scheduled_for == later


# --- visibility and broadcast fan-out ---


@pytest.mark.asyncio
async def test_personal_message_visible_to_recipient_only(mailbox):
    msg = await _personal(mailbox)
    assert [m.id for m in await mailbox.list_for(ALICE)] == [msg.id]
    assert await mailbox.list_for(BOB) == []
    with pytest.raises(NotFound):
        await mailbox.mark_read(msg.id, BOB)


@pytest.mark.asyncio
async def test_broadcast_counts_once_per_viewer(engine, mailbox, carol):
    await _broadcast(mailbox)
    for user in await engine.directory_service.list_users():
        if user.id == ADMIN:
            continue
        assert await mailbox.unread_count(user.id) == 1
    assert mailbox.message_storage.count == 1


@pytest.mark.asyncio
async def test_broadcast_read_state_is_per_viewer(mailbox):
    msg = await _broadcast(mailbox)
    await _personal(mailbox)
    alice_before = await mailbox.unread_count(ALICE)
    bob_before = await mailbox.unread_count(BOB)

    await mailbox.mark_read(msg.id, ALICE)
    assert await mailbox.unread_count(ALICE) == alice_before - 1
    assert await mailbox.unread_count(BOB) == bob_before

    await mailbox.mark_read(msg.id, BOB)
    assert await mailbox.unread_count(BOB) == bob_before - 1
    assert await mailbox.unread_count(ALICE) == alice_before - 1

    admin_view = await mailbox.list_for(ADMIN, MessageFilter.ALL)
    assert [m.id for m in admin_view] == [msg.id]
    await _assert_unread_consistent(mailbox)


@pytest.mark.asyncio
async def test_sender_view_is_always_read(mailbox):
    msg = await _broadcast(mailbox)
    assert await mailbox.unread_count(ADMIN) == 0
    assert (await mailbox.get_for(msg.id, ADMIN)).is_read
    await mailbox.mark_unread(msg.id, ADMIN)
    assert await mailbox.unread_count(ADMIN) == 0


# --- read state ---


@pytest.mark.asyncio
async def test_mark_read_and_unread_are_idempotent(mailbox):
    msg = await _personal(mailbox)
    first = await mailbox.mark_read(msg.id, ALICE)
    second = await mailbox.mark_read(msg.id, ALICE)
    assert first.is_read and second.is_read
    assert await mailbox.unread_count(ALICE) == 0

    await mailbox.mark_unread(msg.id, ALICE)
    again = await mailbox.mark_unread(msg.id, ALICE)
    assert not again.is_read
    assert await mailbox.unread_count(ALICE) == 1


@pytest.mark.asyncio
async def test_mark_read_unknown_id(mailbox):
    with pytest.raises(NotFound):
        await mailbox.mark_read("missing", ALICE)
    with pytest.raises(NotFound):
        await mailbox.mark_unread("missing", ALICE)


@pytest.mark.asyncio
async def test_mark_all_read_for_actor(mailbox):
    await _broadcast(mailbox)
    await _personal(mailbox)
    await _personal(mailbox, recipient=BOB)

    changed = await mailbox.mark_all_read_for_actor(ALICE)

    assert changed == 2
    assert await mailbox.unread_count(ALICE) == 0
    assert await mailbox.unread_count(BOB) == 2
    assert await mailbox.mark_all_read_for_actor(ALICE) == 0


@pytest.mark.asyncio
async def test_snapshots_do_not_leak_mutation(mailbox):
    msg = await _personal(mailbox)
    await mailbox.mark_read(msg.id, ALICE)
    assert msg.is_read is False
    with pytest.raises(AttributeError):
        msg.is_read = True


# --- star ---


@pytest.mark.asyncio
async def test_toggle_star_per_viewer(mailbox):
    msg = await _broadcast(mailbox)
    starred = await mailbox.toggle_star(msg.id, ALICE)
    assert starred.is_starred
    assert [m.id for m in await mailbox.list_for(ALICE, MessageFilter.STARRED)] == [msg.id]
    assert await mailbox.list_for(BOB, MessageFilter.STARRED) == []

    unstarred = await mailbox.toggle_star(msg.id, ALICE)
    assert not unstarred.is_starred


# --- recall ---


@pytest.mark.asyncio
async def test_recall_removes_message_for_everyone(mailbox):
    msg = await _broadcast(mailbox)
    await mailbox.mark_read(msg.id, ALICE)

    await mailbox.delete(msg.id, ADMIN)

    for actor in (ADMIN, ALICE, BOB):
        assert await mailbox.list_for(actor) == []
        assert await mailbox.unread_count(actor) == 0
    with pytest.raises(NotFound):
        await mailbox.get_for(msg.id, ALICE)


@pytest.mark.asyncio
async def test_second_recall_fails(mailbox):
    msg = await _personal(mailbox)
    await mailbox.recall(msg.id, ADMIN)
    with pytest.raises(NotFound):
        await mailbox.recall(msg.id, ADMIN)


@pytest.mark.asyncio
async def test_only_sender_can_recall(mailbox):
    msg = await mailbox.send(ALICE, BOB, "Lunch", "Noon?", kind=MessageKind.PERSONAL)

    for actor in (ADMIN, BOB):
        with pytest.raises(PermissionDenied):
            await mailbox.recall(msg.id, actor)
    assert (await mailbox.get_for(msg.id, BOB)).subject == "Lunch"

    await mailbox.recall(msg.id, ALICE)
    with pytest.raises(NotFound):
        await mailbox.get_for(msg.id, BOB)


# --- listing ---


@pytest.mark.asyncio
async def test_list_newest_first(mailbox):
    first = await _personal(mailbox, subject="First")
    second = await _personal(mailbox, subject="Second")
    third = await _broadcast(mailbox, subject="Third")
    assert [m.id for m in await mailbox.list_for(ALICE)] == [third.id, second.id, first.id]


@pytest.mark.asyncio
async def test_system_filter_includes_broadcasts(mailbox):
    personal = await _personal(mailbox)
    system = await mailbox.send(ADMIN, ALICE, "Password policy", "Rotate now", kind=MessageKind.SYSTEM)
    broadcast = await _broadcast(mailbox)

    listed = await mailbox.list_for(ALICE, MessageFilter.SYSTEM)

    assert {m.id for m in listed} == {system.id, broadcast.id}
    assert personal.id not in {m.id for m in listed}


@pytest.mark.asyncio
async def test_search_matches_subject_or_content(mailbox):
    maintenance = await _broadcast(mailbox, subject="Server Maintenance", content="Downtime")
    await _personal(mailbox, subject="Welcome", content="Profile settings")
    payroll = await _personal(mailbox, subject="Payroll", content="Maintenance of records")

    found = await mailbox.list_for(ALICE, search_term="MAINTENANCE")
    assert {m.id for m in found} == {maintenance.id, payroll.id}

    await mailbox.mark_read(payroll.id, ALICE)
    unread_found = await mailbox.list_for(ALICE, MessageFilter.UNREAD, "maintenance")
    assert [m.id for m in unread_found] == [maintenance.id]


@pytest.mark.asyncio
async def test_unread_count_matches_unread_list_through_mutations(mailbox):
    a = await _broadcast(mailbox)
    b = await _personal(mailbox)
    c = await _personal(mailbox, recipient=BOB)
    await _assert_unread_consistent(mailbox)

    steps = [
        mailbox.mark_read(a.id, ALICE),
        mailbox.mark_read(c.id, BOB),
        mailbox.mark_unread(a.id, ALICE),
        mailbox.mark_read(b.id, ALICE),
        mailbox.delete(a.id, ADMIN),
        mailbox.mark_unread(b.id, ALICE),
    ]
    for step in steps:
        await step
        await _assert_unread_consistent(mailbox)


@pytest.mark.asyncio
async def test_list_sent(mailbox):
    await mailbox.send(ALICE, BOB, "Hi Bob", "From Alice")
    sent = await _personal(mailbox)
    broadcast = await _broadcast(mailbox)
    assert [m.id for m in await mailbox.list_sent(ADMIN)] == [broadcast.id, sent.id]


@pytest.mark.asyncio
async def test_stats(mailbox):
    assert (await mailbox.stats())["read_rate"] == 0

    broadcast = await _broadcast(mailbox)
    personal = await _personal(mailbox)
    await mailbox.send(ADMIN, BOB, "Notice", "System", kind=MessageKind.SYSTEM)
    await mailbox.mark_read(broadcast.id, ALICE)
    await mailbox.mark_read(personal.id, ALICE)

    stats = await mailbox.stats()

    assert stats["total_messages"] == 3
    assert stats["broadcast_count"] == 1
    assert stats["system_count"] == 1
    assert stats["personal_count"] == 1
    assert stats["active_users"] == 3
    # pairs: broadcast x2 (alice, bob), personal x1, system x1 -> 2 of 4 read
    assert stats["read_rate"] == 50
