from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class FeatureConfig:
    name: str
    icon: str
    description: str


DEFAULT_FEATURE_NAME = "Feature"
DEFAULT_FEATURE_ICON = "construction"
DEFAULT_FEATURE_DESCRIPTION = "This feature is currently under development. Check back soon!"

IMPLEMENTED_FEATURES = frozenset(
    {
        "dashboard",
        "villages",
        "household-approvals",
        "active-households",
        "members",
        "sticker-approvals",
    }
)

FEATURE_CONFIG: Mapping[str, FeatureConfig] = MappingProxyType(
    {
        # superadmin
        "villages": FeatureConfig(
            "Village List",
            "holiday_village",
            "Manage villages and tenants across the platform. This comprehensive feature will allow you to "
            "create, edit, and oversee all villages in the system.",
        ),
        "users": FeatureConfig(
            "Users",
            "group",
            "Comprehensive user management system. Create, edit, and manage user accounts, roles, and "
            "permissions across all villages in the platform.",
        ),
        "superadmin-payments": FeatureConfig(
            "Payments",
            "payment",
            "Advanced payment processing and billing system. Handle all financial transactions, fees, and "
            "billing across villages with integrated reporting.",
        ),
        "reports": FeatureConfig(
            "Reports",
            "assessment",
            "Comprehensive analytics and reporting dashboard. Generate detailed insights, export data, and "
            "monitor key performance indicators.",
        ),
        # admin_head
        "household-approvals": FeatureConfig(
            "Household Approvals",
            "approval",
            "Review and approve household applications. Streamline the onboarding process for new residents "
            "with comprehensive application management tools.",
        ),
        "active-households": FeatureConfig(
            "Active Households",
            "home",
            "Manage active household records and information. View, edit, and maintain comprehensive household "
            "data with member management capabilities.",
        ),
        "fees-management": FeatureConfig(
            "Fees Management",
            "request_quote",
            "Configure and manage community fees and charges. Set fee structures, manage billing cycles, and "
            "handle payment collection workflows.",
        ),
        "payment-status": FeatureConfig(
            "Payment Status",
            "payment",
            "Monitor payment statuses and track collections. View outstanding payments, generate payment "
            "reports, and manage collection activities.",
        ),
        "rules": FeatureConfig(
            "Rules",
            "rule",
            "Create and manage community rules and regulations. Define policies, set guidelines, and ensure "
            "residents stay informed of community standards.",
        ),
        "announcements": FeatureConfig(
            "Announcements",
            "campaign",
            "Create and manage community announcements. Keep residents informed with important updates, events, "
            "and community news.",
        ),
        "construction-permits": FeatureConfig(
            "Construction Permits",
            "engineering",
            "Manage construction permits and approvals. Handle permit applications, track construction "
            "activities, and ensure compliance with community guidelines.",
        ),
        "sticker-approvals": FeatureConfig(
            "Sticker Approvals",
            "approval",
            "Review and approve vehicle and people sticker requests. Process applications, verify documentation, "
            "and manage sticker approval workflows.",
        ),
        # admin_officer
        "household-records": FeatureConfig(
            "Household Records",
            "folder",
            "Comprehensive household record management system. Access, update, and maintain detailed household "
            "information and member data.",
        ),
        "sticker-requests": FeatureConfig(
            "Sticker Requests",
            "local_offer",
            "Manage vehicle sticker requests and applications. Process new sticker requests, handle renewals, "
            "and track sticker inventory.",
        ),
        "active-stickers": FeatureConfig(
            "Active Stickers",
            "verified",
            "Track and manage active vehicle stickers. Monitor sticker status, handle renewals, and maintain "
            "sticker database records.",
        ),
        "officer-construction-permits": FeatureConfig(
            "Construction Permits",
            "engineering",
            "Process and manage construction permit applications. Review submissions, track approval progress, "
            "and coordinate with contractors.",
        ),
        "manual-payments": FeatureConfig(
            "Manual Payments",
            "payments",
            "Process manual payment transactions. Handle cash payments, payment corrections, and special payment "
            "arrangements.",
        ),
        "resident-inquiries": FeatureConfig(
            "Resident Inquiries",
            "help",
            "Manage and respond to resident inquiries and support requests. Track communication history and "
            "resolution status.",
        ),
        # household_head
        "members": FeatureConfig(
            "Members",
            "people",
            "Manage your household members and their information. Add, edit, and organize family member details "
            "and access permissions.",
        ),
        "visitor-management": FeatureConfig(
            "Visitor Management",
            "person_add",
            "Manage visitor access and guest registrations. Pre-register visitors, generate guest passes, and "
            "track visitor activities.",
        ),
        "active-guest-passes": FeatureConfig(
            "Active Guest Passes",
            "badge",
            "View and manage active guest passes for your visitors. Track pass status, expiration dates, and "
            "visitor check-ins.",
        ),
        "household-sticker-requests": FeatureConfig(
            "Sticker Requests",
            "local_offer",
            "Submit and track vehicle sticker requests for your household. Apply for new stickers and manage "
            "renewals.",
        ),
        "service-requests": FeatureConfig(
            "Service Requests",
            "build",
            "Submit and track maintenance and service requests. Report issues, request repairs, and monitor "
            "resolution progress.",
        ),
        "announcements-rules": FeatureConfig(
            "Announcements & Rules",
            "info",
            "View community announcements and rules. Stay informed about community updates, events, and policy "
            "changes.",
        ),
        "fee-status": FeatureConfig(
            "Fee Status",
            "receipt",
            "View your fee status and payment history. Check outstanding balances, payment due dates, and "
            "transaction records.",
        ),
        # security_officer
        "sticker-validation": FeatureConfig(
            "Sticker Validation",
            "verified_user",
            "Validate vehicle stickers and access permissions. Scan and verify vehicle stickers to ensure "
            "authorized access to the community.",
        ),
        "guest-registration": FeatureConfig(
            "Guest Registration",
            "how_to_reg",
            "Register guests and visitors at the security checkpoint. Process visitor information and generate "
            "temporary access credentials.",
        ),
        "guest-approval-status": FeatureConfig(
            "Guest Approval Status",
            "pending_actions",
            "Check guest approval status and pre-registered visitors. Verify visitor authorization and manage "
            "guest access permissions.",
        ),
        "guest-pass-scan": FeatureConfig(
            "Guest Pass Scan / Entry Log",
            "qr_code_scanner",
            "Scan guest passes and log visitor entries. Track visitor check-ins, departures, and maintain "
            "security entry logs.",
        ),
        "delivery-logging": FeatureConfig(
            "Delivery Logging",
            "local_shipping",
            "Log deliveries and package arrivals. Track delivery information, recipient details, and package "
            "collection status.",
        ),
        "construction-worker-entry": FeatureConfig(
            "Construction Worker Entry",
            "construction",
            "Manage construction worker access and entry logging. Verify worker credentials and track "
            "construction site access.",
        ),
        "incident-report": FeatureConfig(
            "Incident Report",
            "report",
            "Create and manage security incident reports. Document incidents, track investigations, and maintain "
            "security records.",
        ),
        "shift-history": FeatureConfig(
            "Shift History / Logs",
            "history",
            "View shift history and security logs. Access previous shift reports, activity logs, and security "
            "event records.",
        ),
    }
)


def get_feature_config(item_id: str) -> FeatureConfig | None:
    return FEATURE_CONFIG.get(item_id)


def get_feature_name(item_id: str) -> str:
    config = get_feature_config(item_id)
    return config.name if config else DEFAULT_FEATURE_NAME


def get_feature_icon(item_id: str) -> str:
    config = get_feature_config(item_id)
    return config.icon if config else DEFAULT_FEATURE_ICON


def get_feature_description(item_id: str) -> str:
    config = get_feature_config(item_id)
    return config.description if config else DEFAULT_FEATURE_DESCRIPTION


def is_coming_soon_feature(item_id: str) -> bool:
    return item_id not in IMPLEMENTED_FEATURES and item_id in FEATURE_CONFIG


def get_page_title(item_id: str) -> str:
    if item_id == "dashboard":
        return "Dashboard"
    return get_feature_name(item_id)
