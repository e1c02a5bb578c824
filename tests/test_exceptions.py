"""Tests for panelkit exceptions."""

import unittest

from panelkit.exceptions import (
    AdminError,
    EntityNotFoundError,
    EntityRemoveError,
    FlattenedException,
    ForbiddenActionError,
    NoEntitiesConfiguredError,
    RegistrationError,
    ResolutionError,
    ServiceNotFoundError,
    UndefinedEntityError,
)


class TestAdminError(unittest.TestCase):
    def test_default_status_code_is_500(self) -> None:
        self.assertEqual(AdminError("boom").status_code, 500)

    def test_placeholders_are_replaced(self) -> None:
        err = AdminError("Cannot edit %entity_name%", parameters={"entity_name": "Product"})
        self.assertEqual(err.translated_message, "Cannot edit Product")
        self.assertEqual(str(err), "Cannot edit Product")

    def test_debug_message_wins_for_str(self) -> None:
        err = AdminError("public", debug_message="internal details")
        self.assertEqual(str(err), "internal details")
        self.assertEqual(err.public_message, "public")

    def test_status_codes_of_domain_errors(self) -> None:
        self.assertEqual(EntityNotFoundError("Product", 7).status_code, 404)
        self.assertEqual(ForbiddenActionError("delete", "Product").status_code, 403)
        self.assertEqual(UndefinedEntityError("Product").status_code, 404)
        self.assertEqual(NoEntitiesConfiguredError().status_code, 500)
        self.assertEqual(EntityRemoveError("Product", "fk violation").status_code, 409)

    def test_entity_not_found_message(self) -> None:
        err = EntityNotFoundError("Product", 7)
        self.assertEqual(err.translated_message, "The Product item with id = 7 does not exist.")
        self.assertEqual(err.entity_id, 7)

    def test_domain_errors_are_admin_errors(self) -> None:
        for err in (UndefinedEntityError("x"), ForbiddenActionError("edit", "x")):
            self.assertIsInstance(err, AdminError)


class TestResolutionErrors(unittest.TestCase):
    def test_message_without_chain(self) -> None:
        err = ResolutionError("missing dep")
        self.assertEqual(str(err), "missing dep")
        self.assertEqual(err.chain, [])

    def test_message_with_chain(self) -> None:
        err = ResolutionError("cannot resolve", chain=["a", "b", "c"])
        self.assertIn("a -> b -> c", str(err))
        self.assertEqual(err.chain, ["a", "b", "c"])

    def test_service_not_found_carries_name(self) -> None:
        err = ServiceNotFoundError("mailer")
        self.assertEqual(err.service_name, "mailer")
        self.assertIn('"mailer"', str(err))
        self.assertIsInstance(err, ResolutionError)

    def test_registration_error_is_an_exception(self) -> None:
        self.assertTrue(issubclass(RegistrationError, Exception))


class TestFlattenedException(unittest.TestCase):
    def test_uses_status_code_of_admin_error(self) -> None:
        flat = FlattenedException.create(ForbiddenActionError("delete", "Product"))
        self.assertEqual(flat.status_code, 403)
        self.assertEqual(flat.status_text, "Forbidden")
        self.assertEqual(flat.public_message, 'The requested "delete" action is not allowed.')
        self.assertEqual(flat.class_name, "panelkit.exceptions.ForbiddenActionError")

    def test_generic_exception_defaults_to_500(self) -> None:
        flat = FlattenedException.create(ValueError("bad"))
        self.assertEqual(flat.status_code, 500)
        self.assertEqual(flat.message, "bad")
        self.assertEqual(flat.public_message, "Internal Server Error")

    def test_explicit_status_code(self) -> None:
        self.assertEqual(FlattenedException.create(ValueError("bad"), status_code=418).status_code, 418)

    def test_unknown_status_text(self) -> None:
        self.assertEqual(FlattenedException("X", "m", status_code=599).status_text, "Unknown Error")

    def test_cause_chain_is_flattened(self) -> None:
        try:
            try:
                raise KeyError("inner")
            except KeyError as inner:
                raise UndefinedEntityError("Product") from inner
        except UndefinedEntityError as outer:
            flat = FlattenedException.create(outer)

        self.assertIsNotNone(flat.previous)
        self.assertEqual(flat.previous.class_name, "builtins.KeyError")
        self.assertIsNone(flat.previous.previous)

    def test_suppressed_context_is_not_flattened(self) -> None:
        try:
            try:
                raise KeyError("inner")
            except KeyError:
                raise UndefinedEntityError("Product") from None
        except UndefinedEntityError as outer:
            flat = FlattenedException.create(outer)

        self.assertIsNone(flat.previous)

    def test_implicit_context_is_flattened(self) -> None:
        try:
            try:
                raise KeyError("inner")
            except KeyError:
                raise UndefinedEntityError("Product")
        except UndefinedEntityError as outer:
            flat = FlattenedException.create(outer)

        self.assertEqual(flat.previous.class_name, "builtins.KeyError")


if __name__ == "__main__":
    unittest.main()
