# tests/test_structural_validation.py
"""Tests for whole-object validation and the error tree it produces."""

import pytest

import coarnotify
from coarnotify.core.activitystreams2 import Properties
from coarnotify.core.notify import NotifyMediaItem, NotifyPattern, NotifyProperties
from coarnotify.exceptions import ValidationError
from coarnotify.patterns import (
    Accept,
    AnnounceEndorsement,
    AnnounceEndorsementItem,
    AnnounceRelationship,
    AnnounceReview,
    AnnounceReviewItem,
    AnnounceServiceResult,
    AnnounceServiceResultItem,
    Reject,
    RequestEndorsement,
    RequestEndorsementItem,
    RequestReview,
    RequestReviewItem,
    TentativelyAccept,
    TentativelyReject,
    UndoOffer,
    UnprocessableNotification,
)

from notify_fixtures import (
    ALL_PATTERNS,
    actor_invalid,
    context_invalid,
    invalid,
    object_invalid,
    source,
)

IN_REPLY_TO_FAMILY = [Accept, TentativelyAccept, TentativelyReject, UndoOffer]


def errors_of(cls, doc):
    """Construct a pattern from a document and return its validation errors."""
    with pytest.raises(ValidationError) as exc_info:
        cls(doc)
    return exc_info.value.errors


class TestBasePattern:
    """Test the required fields every pattern shares."""

    def test_bare_pattern(self):
        """Test a pattern with nothing set."""
        with pytest.raises(ValidationError) as exc_info:
            NotifyPattern().validate()

        errors = exc_info.value.errors
        assert Properties.ORIGIN in errors
        assert Properties.TARGET in errors
        assert Properties.OBJECT in errors
        assert Properties.ID not in errors
        assert Properties.TYPE not in errors
        assert errors[Properties.ORIGIN]["errors"] == ["`origin` is a required field"]

    def test_nulled_id_and_type(self):
        """Test that removing id and type makes them errors."""
        pattern = NotifyPattern()
        pattern.id = None
        pattern.type = None

        with pytest.raises(ValidationError) as exc_info:
            pattern.validate()
        assert Properties.ID in exc_info.value.errors
        assert Properties.TYPE in exc_info.value.errors

    def test_all_errors_reported(self):
        """Test that validation does not stop at the first problem."""
        errors = errors_of(RequestReview, invalid("RequestReview"))

        assert Properties.ID in errors
        assert Properties.IN_REPLY_TO in errors
        origin = errors[Properties.ORIGIN]["nested"]
        assert Properties.ID in origin
        assert NotifyProperties.INBOX in origin
        target = errors[Properties.TARGET]["nested"]
        assert Properties.ID in target
        assert NotifyProperties.INBOX in target

    def test_forced_type_survives_invalid_type(self):
        """Test that a bad caller type is widened rather than reported."""
        def doc():
            d = invalid("RequestReview")
            d["type"] = "NotAValidType"
            return d

        notification = RequestReview(doc(), validate_stream_on_construct=False)
        assert notification.type == ["NotAValidType", "Offer", "coar-notify:ReviewAction"]
        assert Properties.TYPE not in errors_of(RequestReview, doc())

    def test_actor_errors(self):
        """Test invalid actors."""
        errors = errors_of(RequestReview, actor_invalid(source("RequestReview")))
        actor = errors[Properties.ACTOR]["nested"]
        assert Properties.ID in actor
        assert Properties.TYPE in actor

    def test_object_errors(self):
        """Test invalid objects."""
        errors = errors_of(RequestReview, object_invalid(source("RequestReview")))
        obj = errors[Properties.OBJECT]["nested"]
        assert Properties.ID in obj
        assert NotifyProperties.CITE_AS in obj

    def test_context_errors(self):
        """Test invalid contexts."""
        errors = errors_of(AnnounceEndorsement, context_invalid(source("AnnounceEndorsement")))
        context = errors[Properties.CONTEXT]["nested"]
        assert Properties.ID in context
        assert NotifyProperties.CITE_AS in context

    def test_errors_survive_serialisation(self):
        """Test the plain-key rendering of the error tree."""
        with pytest.raises(ValidationError) as exc_info:
            RequestReview(invalid("RequestReview"))

        plain = exc_info.value.to_dict()
        assert "id" in plain
        assert "inbox" in plain["origin"]["nested"]


class TestCanonicalDocuments:
    """Test that every canonical document validates."""

    @pytest.mark.parametrize("name", sorted(ALL_PATTERNS))
    def test_valid(self, name):
        """Test construction and validation of the canonical document."""
        cls = getattr(coarnotify, name)
        notification = cls(source(name))
        assert notification.validate() is True

    @pytest.mark.parametrize("name", sorted(ALL_PATTERNS))
    def test_invalid(self, name):
        """Test that breaking the base fields fails every pattern."""
        cls = getattr(coarnotify, name)
        with pytest.raises(ValidationError):
            cls(invalid(name))


class TestInReplyToIdentity:
    """Test the inReplyTo / object id constraint."""

    @pytest.mark.parametrize("cls", IN_REPLY_TO_FAMILY)
    def test_matching(self, cls):
        """Test a matching inReplyTo."""
        notification = cls(source(cls.__name__))
        assert notification.in_reply_to == notification.object.id
        assert notification.validate()

    @pytest.mark.parametrize("cls", IN_REPLY_TO_FAMILY)
    def test_mismatch(self, cls):
        """Test an inReplyTo naming some other object."""
        notification = cls(source(cls.__name__))
        notification.in_reply_to = "urn:uuid:00000000-0000-0000-0000-000000000000"

        with pytest.raises(ValidationError) as exc_info:
            notification.validate()

        messages = exc_info.value.errors[Properties.IN_REPLY_TO]["errors"]
        assert len(messages) == 1
        assert "urn:uuid:00000000-0000-0000-0000-000000000000" in messages[0]
        assert notification.object.id in messages[0]

    @pytest.mark.parametrize("cls", IN_REPLY_TO_FAMILY)
    def test_missing(self, cls):
        """Test that inReplyTo is required."""
        doc = source(cls.__name__)
        del doc["inReplyTo"]

        errors = errors_of(cls, doc)
        assert errors[Properties.IN_REPLY_TO]["errors"] == ["`inReplyTo` is a required field"]

    def test_plain_object_id(self):
        """Test the constraint against an object that is not a pattern."""
        doc = source("Accept")
        doc["object"] = {"id": doc["inReplyTo"], "type": "Document"}
        assert Accept(doc).validate()

    def test_nested_pattern_validated(self):
        """Test that a nested pattern is validated in full."""
        doc = source("Accept")
        doc["object"]["origin"]["inbox"] = "not a uri"

        errors = errors_of(Accept, doc)
        nested = errors[Properties.OBJECT]["nested"]
        assert NotifyProperties.INBOX in nested[Properties.ORIGIN]["nested"]

    @pytest.mark.parametrize("cls", IN_REPLY_TO_FAMILY)
    def test_bad_uri_reported_once(self, cls):
        """Test that a malformed inReplyTo is reported once, next to the mismatch."""
        doc = source(cls.__name__)
        doc["inReplyTo"] = "not a uri"

        messages = errors_of(cls, doc)[Properties.IN_REPLY_TO]["errors"]
        assert len(messages) == 2
        assert len([m for m in messages if "not a uri" in m and "Expected" not in m]) == 1
        assert len([m for m in messages if m.startswith("Expected inReplyTo")]) == 1


class TestReject:
    """Test Reject has no inReplyTo constraint."""

    def test_without_in_reply_to(self):
        """Test a Reject with no inReplyTo."""
        doc = source("Reject")
        del doc["inReplyTo"]
        assert Reject(doc).validate()

    def test_mismatched_in_reply_to(self):
        """Test a Reject whose inReplyTo differs from its object."""
        doc = source("Reject")
        doc["inReplyTo"] = "urn:uuid:00000000-0000-0000-0000-000000000000"
        assert Reject(doc).validate()


class TestUnprocessableNotification:
    """Test UnprocessableNotification constraints."""

    def test_summary_required(self):
        """Test that summary is required."""
        doc = source("UnprocessableNotification")
        del doc["summary"]
        errors = errors_of(UnprocessableNotification, doc)
        assert errors[Properties.SUMMARY]["errors"] == ["`summary` is a required field"]

    def test_in_reply_to_required(self):
        """Test that inReplyTo is required."""
        doc = source("UnprocessableNotification")
        del doc["inReplyTo"]
        assert Properties.IN_REPLY_TO in errors_of(UnprocessableNotification, doc)

    def test_bad_in_reply_to_reported_once(self):
        doc = source("UnprocessableNotification")
        doc["inReplyTo"] = "not a uri"
        messages = errors_of(UnprocessableNotification, doc)[Properties.IN_REPLY_TO]["errors"]
        assert len(messages) == 1
        assert messages[0].startswith("Invalid URI")

    def test_no_identity_check(self):
        """Test that inReplyTo need not match the object."""
        doc = source("UnprocessableNotification")
        doc["inReplyTo"] = "urn:uuid:00000000-0000-0000-0000-000000000000"
        assert UnprocessableNotification(doc).validate()


class TestAnnouncePatterns:
    """Test the Announce pattern constraints."""

    @pytest.mark.parametrize("cls", [AnnounceEndorsement, AnnounceReview, AnnounceServiceResult, AnnounceRelationship])
    def test_context_required(self, cls):
        """Test that context is required."""
        doc = source(cls.__name__)
        del doc["context"]
        errors = errors_of(cls, doc)
        assert errors[Properties.CONTEXT]["errors"] == ["`context` is a required field"]

    @pytest.mark.parametrize("cls", [AnnounceEndorsement, AnnounceReview, AnnounceServiceResult])
    def test_context_item_media_type(self, cls):
        """Test that a context item needs a mediaType."""
        doc = source(cls.__name__)
        del doc["context"]["ietf:item"]["mediaType"]
        errors = errors_of(cls, doc)
        item = errors[Properties.CONTEXT]["nested"][NotifyProperties.ITEM]["nested"]
        assert NotifyProperties.MEDIA_TYPE in item

    @pytest.mark.parametrize("cls", [AnnounceEndorsement, AnnounceReview, AnnounceServiceResult])
    def test_context_item_type(self, cls):
        """Test that a context item needs a type."""
        doc = source(cls.__name__)
        del doc["context"]["ietf:item"]["type"]
        errors = errors_of(cls, doc)
        item = errors[Properties.CONTEXT]["nested"][NotifyProperties.ITEM]["nested"]
        assert Properties.TYPE in item

    def test_context_item_type_must_be_object_type(self):
        """Test that a context item type must include an ActivityStreams object type."""
        doc = source("AnnounceReview")
        doc["context"]["ietf:item"]["type"] = "sorg:ScholarlyArticle"
        errors = errors_of(AnnounceReview, doc)
        item = errors[Properties.CONTEXT]["nested"][NotifyProperties.ITEM]["nested"]
        assert Properties.TYPE in item

    @pytest.mark.parametrize("cls", [AnnounceReview, AnnounceServiceResult])
    def test_object_type_required(self, cls):
        """Test that the announced object needs a type."""
        doc = source(cls.__name__)
        del doc["object"]["type"]
        errors = errors_of(cls, doc)
        assert Properties.TYPE in errors[Properties.OBJECT]["nested"]

    def test_announce_endorsement_object_type_optional(self):
        """Test that AnnounceEndorsement does not require an object type."""
        doc = source("AnnounceEndorsement")
        del doc["object"]["type"]
        assert AnnounceEndorsement(doc).validate()

    @pytest.mark.parametrize("prop", ["as:subject", "as:relationship", "as:object", "type"])
    def test_relationship_triple_required(self, prop):
        """Test every part of the relationship triple is required."""
        doc = source("AnnounceRelationship")
        del doc["object"][prop]
        errors = errors_of(AnnounceRelationship, doc)
        nested = errors[Properties.OBJECT]["nested"]
        assert any((k[0] if isinstance(k, tuple) else k) == prop for k in nested)

    def test_relationship_triple_uris(self):
        """Test that triple members must be absolute URIs."""
        doc = source("AnnounceRelationship")
        doc["object"]["as:subject"] = "not a uri"
        errors = errors_of(AnnounceRelationship, doc)
        assert Properties.SUBJECT_TRIPLE in errors[Properties.OBJECT]["nested"]


class TestMediaItems:
    """Test the shared type and mediaType requirements on items."""

    @pytest.mark.parametrize("item_class", [
        RequestReviewItem,
        RequestEndorsementItem,
        AnnounceReviewItem,
        AnnounceEndorsementItem,
        AnnounceServiceResultItem,
    ])
    def test_pattern_items_share_rules(self, item_class):
        """Test that each pattern's item class uses the shared rules."""
        assert issubclass(item_class, NotifyMediaItem)
        assert item_class.validate is NotifyMediaItem.validate

    def test_bare_item(self):
        """Test an item with only an id."""
        item = NotifyMediaItem({"id": "https://example.com/file.pdf"}, validation_context=NotifyProperties.ITEM,
                                validate_stream_on_construct=False)

        with pytest.raises(ValidationError) as exc_info:
            item.validate()
        errors = exc_info.value.errors
        assert errors[Properties.TYPE]["errors"] == ["`type` is a required field"]
        assert errors[NotifyProperties.MEDIA_TYPE]["errors"] == ["`mediaType` is a required field"]
        assert Properties.ID not in errors

    def test_complete_item(self):
        item = NotifyMediaItem(
            {"id": "https://example.com/file.pdf", "type": "Document", "mediaType": "application/pdf"},
            validation_context=NotifyProperties.ITEM,
        )
        assert item.validate()


class TestRequestPatterns:
    """Test the Request pattern constraints."""

    @pytest.mark.parametrize("cls", [RequestReview, RequestEndorsement])
    def test_item_media_type(self, cls):
        """Test that an object item needs a mediaType."""
        doc = source(cls.__name__)
        del doc["object"]["ietf:item"]["mediaType"]
        errors = errors_of(cls, doc)
        item = errors[Properties.OBJECT]["nested"][NotifyProperties.ITEM]["nested"]
        assert item[NotifyProperties.MEDIA_TYPE]["errors"] == ["`mediaType` is a required field"]

    @pytest.mark.parametrize("cls", [RequestReview, RequestEndorsement])
    def test_item_type(self, cls):
        """Test that an object item needs a type."""
        doc = source(cls.__name__)
        del doc["object"]["ietf:item"]["type"]
        errors = errors_of(cls, doc)
        item = errors[Properties.OBJECT]["nested"][NotifyProperties.ITEM]["nested"]
        assert Properties.TYPE in item

    @pytest.mark.parametrize("cls", [RequestReview, RequestEndorsement])
    def test_item_optional(self, cls):
        """Test that the item itself is optional."""
        doc = source(cls.__name__)
        del doc["object"]["ietf:item"]
        assert cls(doc).validate()

    def test_item_id_must_be_url(self):
        """Test that an item id must be an HTTP(S) URL."""
        doc = source("RequestReview")
        doc["object"]["ietf:item"]["id"] = "urn:uuid:4fb3af44-d4f8-4226-9475-2d09c2d8d9e0"
        errors = errors_of(RequestReview, doc)
        item = errors[Properties.OBJECT]["nested"][NotifyProperties.ITEM]["nested"]
        assert Properties.ID in item
