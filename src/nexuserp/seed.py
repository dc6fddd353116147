from __future__ import annotations

import logging

from nexuserp.protocols import Storage

logger = logging.getLogger(__name__)

OFFER_LETTER_CONTENT = """<h1>Offer of Employment</h1>
<p>Dear {{firstName}} {{lastName}},</p>
<p>We are pleased to offer you a position in the {{department}} department,
starting on {{startDate}}.</p>
<p>Please reply to {{email}} to confirm.</p>"""

OFFER_LETTER_STYLES = """body { font-family: Georgia, serif; margin: 2rem; }
h1 { font-size: 1.5rem; border-bottom: 1px solid #ccc; }"""


def seed_demo_data(storage: Storage) -> bool:
    if storage.modules.list_modules():
        return False

    hr_module = storage.modules.create_module(
        {
            "name": "Human Resources",
            "description": "Manage employees and departments",
            "icon": "Users",
        }
    )
    sales_module = storage.modules.create_module(
        {
            "name": "Sales",
            "description": "Leads and opportunities",
            "icon": "TrendingUp",
        }
    )

    employees = storage.forms.create_form(
        {
            "module_id": hr_module["id"],
            "name": "Employees",
            "description": "Employee directory",
            "fields": [
                {"key": "firstName", "label": "First Name", "type": "text", "required": True},
                {"key": "lastName", "label": "Last Name", "type": "text", "required": True},
                {"key": "email", "label": "Email", "type": "text", "required": True},
                {
                    "key": "department",
                    "label": "Department",
                    "type": "select",
                    "required": True,
                    "options": ["Engineering", "Sales", "HR"],
                },
                {"key": "startDate", "label": "Start Date", "type": "date", "required": True},
            ],
        }
    )
    storage.forms.create_form(
        {
            "module_id": sales_module["id"],
            "name": "Leads",
            "description": "Sales leads",
            "fields": [
                {"key": "companyName", "label": "Company Name", "type": "text", "required": True},
                {"key": "contactPerson", "label": "Contact Person", "type": "text", "required": False},
                {
                    "key": "status",
                    "label": "Status",
                    "type": "select",
                    "required": True,
                    "options": ["New", "Contacted", "Qualified", "Lost"],
                },
                {
                    "key": "potentialValue",
                    "label": "Potential Value ($)",
                    "type": "number",
                    "required": False,
                },
            ],
        }
    )
    storage.templates.create_template(
        {
            "module_id": hr_module["id"],
            "form_id": employees["id"],
            "name": "Offer Letter",
            "content": OFFER_LETTER_CONTENT,
            "styles": OFFER_LETTER_STYLES,
        }
    )
    logger.info("Seeded demo modules")
    return True
