"""
Human-readable messages returned to API clients.

Clients branch on the machine-readable ``code``/``gate``/``reason`` fields;
these strings are for display only.
"""
from typing import Dict

from app.core.config import APP_LOCALE

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "unauthenticated": "Authentication required",
        "session_expired": "Session has expired",
        "invalid_credentials": "Invalid email or password",
        "forbidden": "Access denied",
        "owners_only": "Available to owner accounts only",
        "driver_gate": "Drivers cannot access this page. Create an owner account to browse drivers.",
        "no_subscription": "An active subscription is required to view drivers.",
        "no_subscription_post": "An active subscription is required to post a job. See the pricing page.",
        "quota_exceeded": "Your plan allows at most {limit} jobs. Upgrade your plan to post more.",
        "email_taken": "An account with this email already exists",
        "username_taken": "An account with this username already exists",
        "invalid_role": "Invalid role",
        "invalid_plan": "Invalid plan",
        "invalid_transition": "Subscription cannot move from {current} to {target}",
        "activation_conflict": "Another activation is in progress, please retry",
        "validation_error": "Invalid or missing input",
        "user_not_found": "User not found",
        "driver_not_found": "Driver not found",
        "job_not_found": "Job not found",
        "subscription_not_found": "Subscription not found",
        "job_owner_missing": "The job owner could not be found",
        "bootstrap_not_configured": "ADMIN_BOOTSTRAP_TOKEN is not set",
        "invalid_bootstrap_token": "Invalid bootstrap token",
        "internal_error": "Server error",
    },
    "ka": {
        "unauthenticated": "აუცილებელია ავტორიზაცია",
        "session_expired": "სესია ვადაგასულია",
        "invalid_credentials": "არასწორი ელფოსტა ან პაროლი",
        "forbidden": "წვდომა აკრძალულია",
        "owners_only": "მხოლოდ მფლობელებისთვის",
        "driver_gate": "მძღოლებს არ აქვთ წვდომა ამ გვერდზე. შექმენით მფლობელის ანგარიში მძღოლების სანახავად.",
        "no_subscription": "მძღოლების სანახავად საჭიროა აქტიური გამოწერა.",
        "no_subscription_post": "ვაკანსიის გამოსაქვეყნებლად საჭიროა აქტიური გამოწერა. გადადით ტარიფების გვერდზე.",
        "quota_exceeded": "თქვენი გეგმით დაშვებულია მაქსიმუმ {limit} ვაკანსია. განაახლეთ გეგმა მეტი ვაკანსიისთვის.",
        "email_taken": "ამ ელფოსტით უკვე რეგისტრირებულია ანგარიში",
        "username_taken": "ამ მომხმარებლის სახელით უკვე რეგისტრირებულია ანგარიში",
        "invalid_role": "არასწორი როლი",
        "invalid_plan": "არასწორი გეგმა",
        "invalid_transition": "გამოწერის სტატუსის შეცვლა შეუძლებელია: {current} → {target}",
        "activation_conflict": "გააქტიურება უკვე მიმდინარეობს, სცადეთ თავიდან",
        "validation_error": "არასწორი ან არასრული მონაცემები",
        "user_not_found": "მომხმარებელი ვერ მოიძებნა",
        "driver_not_found": "მძღოლი ვერ მოიძებნა",
        "job_not_found": "ვაკანსია ვერ მოიძებნა",
        "subscription_not_found": "გამოწერა ვერ მოიძებნა",
        "job_owner_missing": "ვაკანსიის მფლობელი ვერ მოიძებნა",
        "bootstrap_not_configured": "ADMIN_BOOTSTRAP_TOKEN არ არის მითითებული",
        "invalid_bootstrap_token": "არასწორი bootstrap ტოკენი",
        "internal_error": "სერვერის შეცდომა",
    },
}


def message(key: str, locale: str = None, **params) -> str:
    """Look up a message by key, falling back to English, then to the key itself."""
    catalog = MESSAGES.get(locale or APP_LOCALE, MESSAGES["en"])
    template = catalog.get(key) or MESSAGES["en"].get(key, key)
    return template.format(**params) if params else template
