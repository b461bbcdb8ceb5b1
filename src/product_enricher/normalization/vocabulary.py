"""Canonical unit and form vocabularies per category."""

INTAKE_FORMS = ("capsule", "tablet", "softgel", "gummy", "powder", "liquid", "spray", "patch")

INTAKE_FORM_ALIASES = {
    "capsules": "capsule",
    "caps": "capsule",
    "veggie capsule": "capsule",
    "veggie capsules": "capsule",
    "vegetarian capsules": "capsule",
    "tablets": "tablet",
    "tabs": "tablet",
    "softgels": "softgel",
    "soft gel": "softgel",
    "soft gels": "softgel",
    "gummies": "gummy",
    "powders": "powder",
    "liquids": "liquid",
    "sprays": "spray",
    "patches": "patch",
}

DOSE_UNIT_ALIASES = {
    "mg": "mg",
    "milligram": "mg",
    "milligrams": "mg",
    "g": "g",
    "gram": "g",
    "grams": "g",
    "mcg": "mcg",
    "µg": "mcg",
    "μg": "mcg",
    "ug": "mcg",
    "microgram": "mcg",
    "micrograms": "mcg",
    "iu": "IU",
    "international unit": "IU",
    "international units": "IU",
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
}

SIZE_UNIT_ALIASES = {
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "g": "g",
    "gram": "g",
    "grams": "g",
}

USAGE_UNIT_ALIASES = {
    "ml": "ml",
    "milliliter": "ml",
    "pump": "pumps",
    "drop": "drops",
    "pea": "pea-sized",
    "pea-size": "pea-sized",
    "pea size": "pea-sized",
    "pea-sized": "pea-sized",
    "pea sized": "pea-sized",
    "pea-sized amount": "pea-sized",
}
