"""
MemberService — local-first ordering and failure semantics.
Run:  pytest test_member_service.py -v
"""
import pytest
from unittest.mock import MagicMock

from member_sync.core.exceptions import (
    AlreadyRemoved,
    ListNotFound,
    MemberNotFound,
    SyncError,
    ValidationFailed,
)
from member_sync.services.member_service import MemberService
from member_sync.services.subscriber_resolver import SubscriberResolver
from member_sync.services.wire_mapper import from_wire

from conftest import MAILCHIMP_EXCEPTION_MESSAGE


def _seed(repo, mc_list, data, mail_chimp_id="remote-1", **overrides):
    member = from_wire(data)
    member.update(list_id=mc_list["id"], mail_chimp_id=mail_chimp_id, **overrides)
    return repo.insert_member(member)


# ═══════════════════════════════════════════════════════════════════════════
#  Resolver
# ═══════════════════════════════════════════════════════════════════════════

class TestSubscriberResolver:
    def test_unknown_list_wins_over_unknown_member(self, repo):
        with pytest.raises(ListNotFound) as exc:
            SubscriberResolver(repo).resolve("nope", "also-nope")
        assert exc.value.message == "MailChimpList[nope] not found"

    def test_unknown_member(self, repo, mc_list):
        with pytest.raises(MemberNotFound) as exc:
            SubscriberResolver(repo).resolve(mc_list["id"], "ghost")
        assert exc.value.message == "MailChimpListMember[ghost] not found"

    def test_member_of_another_list_is_not_found(self, repo, mc_list, member_data):
        other = repo.create_list("Other list", mail_chimp_id="z9y8x7")
        member = _seed(repo, other, member_data)
        with pytest.raises(MemberNotFound):
            SubscriberResolver(repo).resolve(mc_list["id"], member["id"])

    def test_resolves_pair(self, repo, mc_list, member_data):
        member = _seed(repo, mc_list, member_data)
        found_list, found = SubscriberResolver(repo).resolve(mc_list["id"], member["id"])
        assert found_list["id"] == mc_list["id"]
        assert found["email_address"] == member_data["email_address"]


# ═══════════════════════════════════════════════════════════════════════════
#  Ordering: local commit precedes the remote call
# ═══════════════════════════════════════════════════════════════════════════

class TestLocalFirst:
    def test_create_persists_before_remote_call(self, repo, mc_list, member_data):
        seen = {}

        def post(path, body):
            (stored,) = repo.list_members(mc_list["id"])
            seen["stored"] = stored
            return {"id": "remote-xyz"}

        provider = MagicMock()
        provider.post.side_effect = post
        member = MemberService(repo, provider).create_member(mc_list["id"], member_data)

        assert seen["stored"]["mail_chimp_id"] is None
        assert seen["stored"]["email_address"] == member_data["email_address"]
        provider.post.assert_called_once()
        path, body = provider.post.call_args.args
        assert path == "/lists/b1c2d3e4f5/members"
        assert "interests" not in body
        assert member["mail_chimp_id"] == "remote-xyz"
        assert repo.find_member(mc_list["id"], member["id"])["mail_chimp_id"] == "remote-xyz"

    def test_update_persists_before_remote_call(self, repo, mc_list, member_data):
        member = _seed(repo, mc_list, member_data)
        seen = {}

        def patch(path, body):
            seen["stored"] = repo.find_member(mc_list["id"], member["id"])
            return body

        provider = MagicMock()
        provider.patch.side_effect = patch
        MemberService(repo, provider).update_member(mc_list["id"], member["id"], {"language": "en"})

        assert seen["stored"]["language"] == "en"
        provider.patch.assert_called_once()
        assert provider.patch.call_args.args[0] == "/lists/b1c2d3e4f5/members/remote-1"

    def test_hard_remove_deletes_before_purge(self, repo, mc_list, member_data):
        member = _seed(repo, mc_list, member_data)
        seen = {}

        def post(path, body=None):
            seen["stored"] = repo.find_member(mc_list["id"], member["id"])
            return {}

        provider = MagicMock()
        provider.post.side_effect = post
        MemberService(repo, provider).delete_member_permanently(mc_list["id"], member["id"])

        assert seen["stored"] is None
        provider.post.assert_called_once_with(
            "/lists/b1c2d3e4f5/members/remote-1/actions/delete-permanent")


# ═══════════════════════════════════════════════════════════════════════════
#  Failures leave the local write in place
# ═══════════════════════════════════════════════════════════════════════════

class TestNoRollback:
    def test_create_failure_keeps_local_row(self, service, repo, mc_list, mailchimp, member_data):
        mailchimp.fail_on.add("post")
        with pytest.raises(SyncError) as exc:
            service.create_member(mc_list["id"], member_data)
        assert exc.value.message == MAILCHIMP_EXCEPTION_MESSAGE
        assert exc.value.detail
        (stored,) = repo.list_members(mc_list["id"])
        assert stored["mail_chimp_id"] is None

    def test_create_without_remote_id(self, repo, mc_list, member_data):
        provider = MagicMock()
        provider.post.return_value = {}
        with pytest.raises(SyncError):
            MemberService(repo, provider).create_member(mc_list["id"], member_data)
        (stored,) = repo.list_members(mc_list["id"])
        assert stored["mail_chimp_id"] is None

    def test_update_failure_keeps_local_change(self, service, repo, mc_list, mailchimp, member_data):
        member = _seed(repo, mc_list, member_data)
        mailchimp.fail_on.add("patch")
        with pytest.raises(SyncError):
            service.update_member(mc_list["id"], member["id"], {"status": "unsubscribed"})
        assert repo.find_member(mc_list["id"], member["id"])["status"] == "unsubscribed"

    def test_remove_failure_keeps_archived(self, service, repo, mc_list, mailchimp, member_data):
        member = _seed(repo, mc_list, member_data)
        mailchimp.fail_on.add("delete")
        with pytest.raises(SyncError):
            service.remove_member(mc_list["id"], member["id"])
        assert repo.find_member(mc_list["id"], member["id"])["status"] == "archived"

    def test_provider_error_message_passes_through(self, repo, mc_list, member_data):
        from member_sync.core.exceptions import ProviderError

        provider = MagicMock()
        provider.post.side_effect = ProviderError("Member Exists", status_code=400)
        with pytest.raises(SyncError) as exc:
            MemberService(repo, provider).create_member(mc_list["id"], member_data)
        assert exc.value.message == "Member Exists"


# ═══════════════════════════════════════════════════════════════════════════
#  Members never acknowledged by MailChimp
# ═══════════════════════════════════════════════════════════════════════════

class TestMissingRemoteId:
    def test_update_saves_then_refuses_remote(self, service, repo, mc_list, mailchimp, member_data):
        member = _seed(repo, mc_list, member_data, mail_chimp_id=None)
        with pytest.raises(SyncError):
            service.update_member(mc_list["id"], member["id"], {"vip": True})
        assert repo.find_member(mc_list["id"], member["id"])["vip"] is True
        assert mailchimp.calls == []

    def test_remove_archives_then_refuses_remote(self, service, repo, mc_list, mailchimp, member_data):
        member = _seed(repo, mc_list, member_data, mail_chimp_id=None)
        with pytest.raises(SyncError):
            service.remove_member(mc_list["id"], member["id"])
        assert repo.find_member(mc_list["id"], member["id"])["status"] == "archived"
        assert mailchimp.calls == []

    def test_hard_remove_is_local_only(self, service, repo, mc_list, mailchimp, member_data):
        member = _seed(repo, mc_list, member_data, mail_chimp_id=None)
        service.delete_member_permanently(mc_list["id"], member["id"])
        assert repo.find_member(mc_list["id"], member["id"]) is None
        assert mailchimp.calls == []


# ═══════════════════════════════════════════════════════════════════════════
#  Status lifecycle
# ═══════════════════════════════════════════════════════════════════════════

class TestLifecycle:
    def test_remove_archived_is_rejected_without_side_effects(self, service, repo, mc_list,
                                                              mailchimp, member_data):
        member = _seed(repo, mc_list, member_data, status="archived")
        with pytest.raises(AlreadyRemoved):
            service.remove_member(mc_list["id"], member["id"])
        assert repo.find_member(mc_list["id"], member["id"])["status"] == "archived"
        assert mailchimp.calls == []

    def test_update_cannot_leave_archived(self, service, repo, mc_list, mailchimp, member_data):
        member = _seed(repo, mc_list, member_data, status="archived")
        with pytest.raises(ValidationFailed) as exc:
            service.update_member(mc_list["id"], member["id"], {"status": "subscribed"})
        assert "Cannot transition" in exc.value.errors["status"][0]
        assert repo.find_member(mc_list["id"], member["id"])["status"] == "archived"
        assert mailchimp.calls == []

    def test_archived_member_rejects_update_without_status_change(self, service, repo, mc_list,
                                                                  mailchimp, member_data):
        member = _seed(repo, mc_list, member_data, status="archived")
        with pytest.raises(ValidationFailed) as exc:
            service.update_member(mc_list["id"], member["id"], {"language": "en"})
        assert exc.value.errors["status"] == [
            "Cannot transition from 'archived' to 'archived'. "
            "Allowed: none (purge the member instead)"
        ]
        assert repo.find_member(mc_list["id"], member["id"])["language"] == member_data["language"]
        assert mailchimp.calls == []

    def test_update_cannot_archive(self, service, repo, mc_list, mailchimp, member_data):
        member = _seed(repo, mc_list, member_data)
        with pytest.raises(ValidationFailed) as exc:
            service.update_member(mc_list["id"], member["id"], {"status": "archived"})
        assert "status" in exc.value.errors
        assert repo.find_member(mc_list["id"], member["id"])["status"] == "subscribed"
        assert mailchimp.calls == []

    def test_invalid_update_touches_nothing(self, service, repo, mc_list, mailchimp, member_data):
        member = _seed(repo, mc_list, member_data)
        before = repo.find_member(mc_list["id"], member["id"])
        with pytest.raises(ValidationFailed) as exc:
            service.update_member(mc_list["id"], member["id"], {"language": "klingon"})
        assert list(exc.value.errors) == ["language"]
        assert repo.find_member(mc_list["id"], member["id"]) == before
        assert mailchimp.calls == []

    def test_invalid_create_touches_nothing(self, service, repo, mc_list, mailchimp):
        with pytest.raises(ValidationFailed):
            service.create_member(mc_list["id"], {"email_address": "nope"})
        assert repo.list_members(mc_list["id"]) == []
        assert mailchimp.calls == []
