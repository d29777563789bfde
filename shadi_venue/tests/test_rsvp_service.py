"""
Test suite for the RSVP service
Tests: submission, listing order, status changes, wedding scoping, stats
"""
import pytest

from shadi_venue.core.errors import InvalidArgumentError, NotFoundError


GUEST = {"name": "Kabir", "phone": "+91 98765 43210", "guests": 2, "message": "Can't wait!"}


class TestRsvpSubmission:
    """Guests submitting RSVPs"""

    def test_create_starts_pending(self, run, rsvp_service):
        """A new RSVP gets an id, pending status and equal timestamps"""
        rsvp = run(rsvp_service.create("w1", GUEST))

        assert rsvp["id"], "RSVP should get an id"
        assert rsvp["userId"] == "w1"
        assert rsvp["status"] == "pending"
        assert rsvp["createdAt"] == rsvp["updatedAt"]
        assert rsvp["name"] == "Kabir" and rsvp["guests"] == 2, "Guest fields should be stored as sent"
        assert "_id" not in rsvp
        print(f"✓ Created RSVP {rsvp['id']}")

    def test_guest_cannot_set_reserved_fields(self, run, rsvp_service):
        rsvp = run(rsvp_service.create("w1", {
            **GUEST,
            "id": "chosen-id",
            "status": "confirmed",
            "userId": "other-wedding",
            "createdAt": "2000-01-01",
        }))

        assert rsvp["id"] != "chosen-id"
        assert rsvp["status"] == "pending", "Status must always start pending"
        assert rsvp["userId"] == "w1"
        assert rsvp["createdAt"] != "2000-01-01"

    def test_list_contains_created_entry_once(self, run, rsvp_service):
        rsvp = run(rsvp_service.create("w1", GUEST))

        matches = [r for r in run(rsvp_service.list_by_wedding("w1")) if r["id"] == rsvp["id"]]

        assert len(matches) == 1
        assert matches[0]["status"] == "pending"
        assert all(matches[0][k] == v for k, v in GUEST.items()), "Guest fields should round-trip"

    def test_ids_are_unique(self, run, rsvp_service):
        ids = {run(rsvp_service.create("w1", GUEST))["id"] for _ in range(5)}
        assert len(ids) == 5

    def test_rejects_invalid_guest_fields(self, run, rsvp_service):
        with pytest.raises(InvalidArgumentError):
            run(rsvp_service.create("w1", {"$gt": 1}))
        with pytest.raises(InvalidArgumentError):
            run(rsvp_service.create("w1", "not an object"))
        assert run(rsvp_service.list_by_wedding("w1")) == []

    def test_list_is_newest_first_and_scoped(self, run, rsvp_service):
        first = run(rsvp_service.create("w1", {"name": "A"}))
        run(rsvp_service.create("w2", {"name": "Other wedding"}))
        second = run(rsvp_service.create("w1", {"name": "B"}))

        rsvps = run(rsvp_service.list_by_wedding("w1"))

        assert [r["id"] for r in rsvps] == [second["id"], first["id"]]
        assert all(r["userId"] == "w1" for r in rsvps)
        assert run(rsvp_service.list_by_wedding("nobody")) == []


class TestRsvpStatus:
    """Host changing RSVP status"""

    def test_confirm_then_decline(self, run, rsvp_service):
        rsvp = run(rsvp_service.create("w1", GUEST))

        confirmed = run(rsvp_service.update_status(rsvp["id"], "confirmed"))
        assert confirmed["status"] == "confirmed"
        assert confirmed["updatedAt"] > rsvp["updatedAt"], "updatedAt should advance"
        assert confirmed["createdAt"] == rsvp["createdAt"]
        assert confirmed["name"] == "Kabir"

        # Transitions are unrestricted
        declined = run(rsvp_service.update_status(rsvp["id"], "declined"))
        assert declined["status"] == "declined"
        assert run(rsvp_service.update_status(rsvp["id"], "pending"))["status"] == "pending"
        print("✓ RSVP moved through every status")

    def test_invalid_status_leaves_rsvp_unchanged(self, run, rsvp_service):
        rsvp = run(rsvp_service.create("w1", GUEST))

        with pytest.raises(InvalidArgumentError):
            run(rsvp_service.update_status(rsvp["id"], "maybe"))

        assert run(rsvp_service.get(rsvp["id"])) == rsvp

    def test_unknown_rsvp(self, run, rsvp_service):
        with pytest.raises(NotFoundError):
            run(rsvp_service.update_status("no-such-rsvp", "confirmed"))

    def test_invalid_status_checked_before_lookup(self, run, rsvp_service):
        with pytest.raises(InvalidArgumentError):
            run(rsvp_service.update_status("no-such-rsvp", "maybe"))

    def test_other_wedding_rsvp_is_not_found(self, run, rsvp_service):
        rsvp = run(rsvp_service.create("w1", GUEST))

        with pytest.raises(NotFoundError):
            run(rsvp_service.update_status(rsvp["id"], "confirmed", wedding_id="w2"))

        assert run(rsvp_service.get(rsvp["id"]))["status"] == "pending"
        assert run(rsvp_service.update_status(rsvp["id"], "confirmed", wedding_id="w1"))["status"] == "confirmed"


class TestRsvpStats:
    """Per-status counts"""

    def test_stats_count_each_status(self, run, rsvp_service):
        ids = [run(rsvp_service.create("w1", {"name": f"Guest {i}"}))["id"] for i in range(4)]
        run(rsvp_service.create("w2", {"name": "Elsewhere"}))
        run(rsvp_service.update_status(ids[0], "confirmed"))
        run(rsvp_service.update_status(ids[1], "confirmed"))
        run(rsvp_service.update_status(ids[2], "declined"))

        stats = run(rsvp_service.stats("w1"))

        assert stats.total == 4
        assert stats.confirmed == 2
        assert stats.declined == 1
        assert stats.pending == 1

    def test_stats_for_empty_wedding(self, run, rsvp_service):
        stats = run(rsvp_service.stats("w1"))
        assert stats.model_dump() == {"total": 0, "pending": 0, "confirmed": 0, "declined": 0}
