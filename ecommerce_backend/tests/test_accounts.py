import pytest

from src.core.errors import AuthError, ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from src.services import accounts


@pytest.fixture
def shopper(session):
    return accounts.signup(session, " Shopper@Example.com ", "secret123", "Rahim Uddin")


class TestSignupLogin:
    def test_signup_normalises_email_and_defaults_to_customer(self, shopper):
        assert shopper.email == "shopper@example.com"
        assert shopper.role == "customer"
        assert not accounts.is_admin(shopper)

    def test_duplicate_email(self, session, shopper):
        with pytest.raises(ConflictError):
            accounts.signup(session, "SHOPPER@example.com", "other-pass")

    def test_super_admin_email_gets_admin_role(self, session):
        owner = accounts.signup(session, "Owner@Example.com", "secret123")
        assert owner.role == "admin"
        assert accounts.is_admin(owner)

    def test_login(self, session, shopper):
        result = accounts.login(session, "shopper@example.com", "secret123")
        assert result["token_type"] == "bearer"
        assert result["is_admin"] is False
        with pytest.raises(AuthError):
            accounts.login(session, "shopper@example.com", "wrong")
        with pytest.raises(AuthError):
            accounts.login(session, "nobody@example.com", "secret123")


class TestRoles:
    def test_promote_and_demote(self, session, shopper):
        assert accounts.set_role(session, shopper.id, "admin").role == "admin"
        assert accounts.set_role(session, str(shopper.id), "customer").role == "customer"

    def test_super_admin_cannot_be_demoted(self, session):
        owner = accounts.signup(session, "owner@example.com", "secret123")
        with pytest.raises(PermissionDeniedError):
            accounts.set_role(session, owner.id, "customer")

    def test_unknown_role_and_user(self, session, shopper):
        with pytest.raises(ValidationError):
            accounts.set_role(session, shopper.id, "owner")
        with pytest.raises(NotFoundError):
            accounts.get_profile(session, "not-a-uuid")


class TestAddresses:
    def test_crud_is_scoped_to_the_owner(self, session, shopper):
        other = accounts.signup(session, "other@example.com", "secret123")
        address = accounts.save_address(session, shopper, {"full_name": "Rahim", "district": "Dhaka", "area": "Banani"})
        assert [a.id for a in accounts.list_addresses(session, shopper)] == [address.id]
        assert accounts.list_addresses(session, other) == []

        with pytest.raises(NotFoundError):
            accounts.delete_address(session, other, address.id)
        accounts.save_address(session, shopper, {"phone": "01800000000"}, address.id)
        assert accounts.list_addresses(session, shopper)[0].phone == "01800000000"
        accounts.delete_address(session, shopper, address.id)
        assert accounts.list_addresses(session, shopper) == []

    def test_location_is_validated(self, session, shopper):
        with pytest.raises(ValidationError):
            accounts.save_address(session, shopper, {"district": "Dhaka", "area": "Patenga"})


class TestWishlistAndReviews:
    def test_toggle(self, session, shopper, catalog):
        apple = catalog["apple"]
        assert accounts.toggle_wishlist(session, shopper, apple.id) is True
        assert [p.name for p in accounts.wishlist_products(session, shopper)] == ["Apple"]
        assert accounts.toggle_wishlist(session, shopper, apple.id) is False
        assert accounts.wishlist_products(session, shopper) == []
        with pytest.raises(NotFoundError):
            accounts.toggle_wishlist(session, shopper, 9999)

    def test_review(self, session, shopper, catalog):
        review = accounts.add_review(session, shopper, catalog["milk"].id, 5, "Fresh!")
        assert review.author_name == "Rahim Uddin"
        with pytest.raises(ValidationError):
            accounts.add_review(session, shopper, catalog["milk"].id, 6, None)
