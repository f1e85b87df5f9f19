LOGO_PATCH_KEY = "logo-patch"
JOGGING_PANTS_KEY = "jogging-pants"

DEFAULT_MAX_PER_KEY = 1
LOGO_PATCH_DEFAULT_MAX = 3

SLOT_LIMIT_KEY = "slot-limit"

# Bump whenever ITEM_ALIASES changes so clients holding per-key limits refetch them.
ALIAS_TABLE_VERSION = "2"

# Substring families checked before the alias table, longest pattern first.
KEY_FAMILIES = (
    ("new logo patch", LOGO_PATCH_KEY),
    ("jogging pants", JOGGING_PANTS_KEY),
    ("logo patch", LOGO_PATCH_KEY),
)

# Normalized display name -> canonical phrase.
ITEM_ALIASES = {
    "shorts": "short",
    "kinder dress (kindergarten)": "kinder dress",
    "kinder dress - kindergarten": "kinder dress",
    "kinder necktie (kindergarten)": "kinder necktie",
    "kinder necktie - kindergarten": "kinder necktie",
    "elem skirt (elementary)": "elem skirt",
    "elem blouse (elementary)": "elem blouse",
    "elementary skirt": "elem skirt",
    "elementary blouse": "elem blouse",
    "jhs skirt (junior high school)": "jhs skirt",
    "jhs blouse (junior high school)": "jhs blouse",
    "junior high skirt": "jhs skirt",
    "junior high blouse": "jhs blouse",
    "shs skirt (senior high school)": "shs skirt",
    "shs blouse (senior high school)": "shs blouse",
    "shs pants (senior high school)": "shs pants",
    "shs long-sleeve (senior high school)": "shs long-sleeve",
    "senior high skirt": "shs skirt",
    "senior high blouse": "shs blouse",
    "senior high pants": "shs pants",
    "senior high long-sleeve": "shs long-sleeve",
    "college skirt (college)": "college skirt",
    "college blouse (college)": "college blouse",
    "polo straight (college)": "polo straight",
    "polo jacket (kindergarten)": "polo jacket",
    "id lace (kindergarten)": "id lace",
    "id lace (preschool)": "id lace",
    "id lace (elementary)": "id lace",
    "id lace (junior high school)": "id lace",
    "id lace (senior high school)": "id lace",
    "id lace (college)": "id lace",
    "necktie (girls)": "necktie girls",
    "necktie (boys)": "necktie boys",
    "number patch (grade level)": "number patch",
    "number patch (per grade)": "number patch",
    "pe jersey": "jersey",
    "jersey (kindergarten)": "jersey",
    "jersey (preschool)": "jersey",
}

CLAIMED_ORDER_STATUSES = frozenset({"claimed", "completed"})
UNCLAIMED_ORDER_STATUSES = frozenset({"pending", "processing", "ready", "payment_pending"})
VOIDED_ORDER_STATUS = "voided"

OUT_OF_STOCK_STATUSES = frozenset({"out of stock", "out_of_stock"})

RECEIPT_TYPE = "order_receipt"
RECEIPT_VALID_DAYS = 7
