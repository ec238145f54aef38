from decimal import Decimal

from django.db import models

from .conf import default_currency
from .validation.money import MONEY_DECIMAL_PLACES, MONEY_MAX_DIGITS, Money


def money_field(**kwargs):
    return models.DecimalField(max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES, **kwargs)


class User(models.Model):
    first_name = models.CharField(max_length=255)
    last_name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)
    password_hash = models.CharField(max_length=255)
    is_admin = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.first_name} {self.last_name} <{self.email}>"


class Address(models.Model):
    first_name = models.CharField(max_length=255)
    last_name = models.CharField(max_length=255)
    address_line_1 = models.CharField(max_length=255)
    address_line_2 = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=20)
    phone = models.CharField(max_length=30, blank=True)
    country_code = models.CharField(max_length=2, default="US")

    def __str__(self):
        return f"{self.address_line_1}, {self.city}"


class Variant(models.Model):
    sku = models.CharField(max_length=64, unique=True)
    selling_price = money_field(default=Decimal("0"))
    currency = models.CharField(max_length=3, default=default_currency)

    def __str__(self):
        return self.sku

    @property
    def selling_price_money(self) -> Money:
        return Money(self.selling_price, self.currency)


class StockLocation(models.Model):
    name = models.CharField(max_length=255)
    active = models.BooleanField(default=True)

    def __str__(self):
        return self.name


class StockItem(models.Model):
    count_on_hand = models.IntegerField(default=0)
    backorderable = models.BooleanField(default=False)
    variant = models.ForeignKey(Variant, on_delete=models.CASCADE, related_name="stock_items")
    stock_location = models.ForeignKey(StockLocation, on_delete=models.CASCADE, related_name="stock_items")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)


class Order(models.Model):
    class State(models.TextChoices):
        CART = "cart", "Cart"

    MONEY_FIELDS = ("total", "item_total", "adjustment_total", "promo_total")

    slug = models.CharField(max_length=255, db_index=True)
    state = models.CharField(max_length=50, default=State.CART)
    special_instructions = models.TextField(blank=True)
    confirmed = models.BooleanField(default=False)

    # various prices and totals
    currency = models.CharField(max_length=3, default=default_currency)
    total = money_field(default=Decimal("0"))
    item_total = money_field(default=Decimal("0"))
    adjustment_total = money_field(default=Decimal("0"))
    promo_total = money_field(default=Decimal("0"))

    user = models.ForeignKey(User, on_delete=models.PROTECT, related_name="orders")
    billing_address = models.ForeignKey(Address, on_delete=models.PROTECT, related_name="+")
    shipping_address = models.ForeignKey(Address, on_delete=models.PROTECT, related_name="+")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Order {self.slug} ({self.state})"

    def money(self, field_name: str) -> Money:
        return Money(getattr(self, field_name), self.currency)


class LineItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="line_items")
    variant = models.ForeignKey(Variant, on_delete=models.PROTECT, related_name="line_items")
    quantity = models.PositiveIntegerField(default=1)
    unit_price = money_field(null=True, blank=True)
    total = money_field()
    currency = models.CharField(max_length=3, default=default_currency)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["order", "variant"], name="unique_variant_per_order"),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.variant_id}"
