"""Square OAuth permission scopes.

The values match the identifiers documented at
https://developer.squareup.com/docs/oauth-api/square-permissions. Callers store
these strings, so renaming one is a breaking change.
"""

# Catalog
ITEMS_READ = "ITEMS_READ"
ITEMS_WRITE = "ITEMS_WRITE"

# Orders, payments & checkout
ORDERS_READ = "ORDERS_READ"
ORDERS_WRITE = "ORDERS_WRITE"
PAYMENTS_READ = "PAYMENTS_READ"
PAYMENTS_WRITE = "PAYMENTS_WRITE"

# Customers
CUSTOMERS_READ = "CUSTOMERS_READ"
CUSTOMERS_WRITE = "CUSTOMERS_WRITE"

# Employees
EMPLOYEES_READ = "EMPLOYEES_READ"

# Gift cards
GIFTCARDS_READ = "GIFTCARDS_READ"
GIFTCARDS_WRITE = "GIFTCARDS_WRITE"

# Inventory
INVENTORY_READ = "INVENTORY_READ"
INVENTORY_WRITE = "INVENTORY_WRITE"

# Invoices
INVOICES_READ = "INVOICES_READ"
INVOICES_WRITE = "INVOICES_WRITE"

# Labor (timecards)
TIMECARDS_READ = "TIMECARDS_READ"
TIMECARDS_WRITE = "TIMECARDS_WRITE"

# Merchant & locations
MERCHANT_PROFILE_READ = "MERCHANT_PROFILE_READ"
MERCHANT_PROFILE_WRITE = "MERCHANT_PROFILE_WRITE"

# Loyalty
LOYALTY_READ = "LOYALTY_READ"
LOYALTY_WRITE = "LOYALTY_WRITE"

# Payouts
PAYOUTS_READ = "PAYOUTS_READ"

# Online store sites
ONLINE_STORE_SITE_READ = "ONLINE_STORE_SITE_READ"

# Subscriptions
SUBSCRIPTIONS_READ = "SUBSCRIPTIONS_READ"
SUBSCRIPTIONS_WRITE = "SUBSCRIPTIONS_WRITE"

# Vendors
VENDOR_READ = "VENDOR_READ"
VENDOR_WRITE = "VENDOR_WRITE"

# Always requested; the provider needs it to identify the merchant.
DEFAULT_SCOPE = MERCHANT_PROFILE_READ

ALL_SCOPES: tuple[str, ...] = (
    ITEMS_READ,
    ITEMS_WRITE,
    ORDERS_READ,
    ORDERS_WRITE,
    PAYMENTS_READ,
    PAYMENTS_WRITE,
    CUSTOMERS_READ,
    CUSTOMERS_WRITE,
    EMPLOYEES_READ,
    GIFTCARDS_READ,
    GIFTCARDS_WRITE,
    INVENTORY_READ,
    INVENTORY_WRITE,
    INVOICES_READ,
    INVOICES_WRITE,
    TIMECARDS_READ,
    TIMECARDS_WRITE,
    MERCHANT_PROFILE_READ,
    MERCHANT_PROFILE_WRITE,
    LOYALTY_READ,
    LOYALTY_WRITE,
    PAYOUTS_READ,
    ONLINE_STORE_SITE_READ,
    SUBSCRIPTIONS_READ,
    SUBSCRIPTIONS_WRITE,
    VENDOR_READ,
    VENDOR_WRITE,
)
