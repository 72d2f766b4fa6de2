# novara/repos/checkout_repo.py
from sqlalchemy.orm import Session

from novara.data.models.checkout import CheckoutModel


class CheckoutRepo:
    def __init__(self, db: Session):
        self.db = db

    def create(self, checkout: CheckoutModel) -> CheckoutModel:
        self.db.add(checkout)
        self.db.commit()
        self.db.refresh(checkout)
        return checkout

    def get(self, checkout_id: int) -> CheckoutModel | None:
        return self.db.get(CheckoutModel, checkout_id)

    def save(self, checkout: CheckoutModel) -> CheckoutModel:
        self.db.add(checkout)
        self.db.commit()
        self.db.refresh(checkout)
        return checkout
