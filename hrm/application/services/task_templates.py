"""Default task templates for onboarding and offboarding cases.

Templates are plain data. Onboarding defaults are assembled from the
subject's designation and department: common tasks for everyone, one
role-specific set chosen by keyword match on the designation, and
department-specific extras.
"""

from __future__ import annotations

from hrm.application.dtos.subject import SubjectRecord
from hrm.application.dtos.template import TemplateItem
from hrm.domain.enums import CaseKind

COMMON_TASKS: tuple[TemplateItem, ...] = (
    TemplateItem(
        "Complete HR documentation",
        "Fill out all required HR forms including tax documents, emergency contacts, and personal information",
        due_in_days=3,
        category="documentation",
        priority="high",
    ),
    TemplateItem(
        "Office tour and introductions",
        "Get familiar with office layout, meet team members, and understand office facilities",
        due_in_days=1,
        category="orientation",
        priority="high",
    ),
    TemplateItem(
        "IT orientation",
        "Setup email account, learn internal tools, understand IT policies and security protocols",
        due_in_days=2,
        category="it_setup",
        priority="high",
    ),
    TemplateItem(
        "Review company policies",
        "Read and acknowledge company handbook, code of conduct, and workplace policies",
        due_in_days=5,
        category="compliance",
        priority="medium",
    ),
    TemplateItem(
        "Benefits enrollment",
        "Review and enroll in company benefits programs (health insurance, retirement, etc.)",
        due_in_days=7,
        category="hr",
        priority="medium",
    ),
)

TECHNICAL_TASKS: tuple[TemplateItem, ...] = (
    TemplateItem(
        "Laptop and equipment setup",
        "Receive laptop, monitor, keyboard, mouse, and other necessary equipment. Configure workstation.",
        due_in_days=1,
        category="it_setup",
        priority="high",
    ),
    TemplateItem(
        "Development environment setup",
        "Install required IDEs, SDKs, and development tools. Configure local development environment.",
        due_in_days=3,
        category="technical",
        priority="high",
    ),
    TemplateItem(
        "GitHub/GitLab access setup",
        "Get access to code repositories, understand branching strategy, and review contribution guidelines",
        due_in_days=2,
        category="technical",
        priority="high",
    ),
    TemplateItem(
        "Codebase walkthrough",
        "Review system architecture, understand codebase structure, and learn coding standards",
        due_in_days=5,
        category="training",
        priority="medium",
    ),
    TemplateItem(
        "Technical documentation review",
        "Read technical docs, API documentation, and system design documents",
        due_in_days=7,
        category="training",
        priority="medium",
    ),
)

SALES_TASKS: tuple[TemplateItem, ...] = (
    TemplateItem(
        "CRM system training",
        "Learn to use the CRM system, understand lead management, and reporting tools",
        due_in_days=2,
        category="training",
        priority="high",
    ),
    TemplateItem(
        "Sales pipeline overview",
        "Understand sales process, pipeline stages, and qualification criteria",
        due_in_days=3,
        category="training",
        priority="high",
    ),
    TemplateItem(
        "Product knowledge session",
        "Learn about company products/services, features, benefits, and competitive advantages",
        due_in_days=5,
        category="training",
        priority="high",
    ),
    TemplateItem(
        "Territory assignment",
        "Receive territory or account assignments and understand coverage responsibilities",
        due_in_days=1,
        category="administrative",
        priority="medium",
    ),
    TemplateItem(
        "Client database access",
        "Get access to client records, understand data privacy policies, and learn contact protocols",
        due_in_days=2,
        category="administrative",
        priority="medium",
    ),
)

HR_TASKS: tuple[TemplateItem, ...] = (
    TemplateItem(
        "HRIS system training",
        "Learn to use HRIS for employee records, leave management, and payroll processing",
        due_in_days=2,
        category="training",
        priority="high",
    ),
    TemplateItem(
        "Company policies review",
        "Deep dive into all HR policies, employee handbook, and compliance requirements",
        due_in_days=3,
        category="compliance",
        priority="high",
    ),
    TemplateItem(
        "Compliance training",
        "Complete mandatory compliance training (labor laws, GDPR, workplace safety, etc.)",
        due_in_days=5,
        category="compliance",
        priority="high",
    ),
    TemplateItem(
        "Document management access",
        "Get access to employee files, understand document retention policies, and confidentiality protocols",
        due_in_days=1,
        category="administrative",
        priority="medium",
    ),
)

FINANCE_TASKS: tuple[TemplateItem, ...] = (
    TemplateItem(
        "Financial systems access",
        "Get access to ERP, accounting software, and financial reporting tools",
        due_in_days=1,
        category="it_setup",
        priority="high",
    ),
    TemplateItem(
        "Financial policies review",
        "Review company financial policies, approval workflows, and internal controls",
        due_in_days=3,
        category="compliance",
        priority="high",
    ),
    TemplateItem(
        "Compliance and audit training",
        "Understand audit requirements, SOX compliance, and financial regulations",
        due_in_days=5,
        category="compliance",
        priority="high",
    ),
)

ENGINEERING_DEPARTMENT_TASKS: tuple[TemplateItem, ...] = (
    TemplateItem(
        "Team introduction meeting",
        "Meet with team members, understand roles, and discuss collaboration tools",
        due_in_days=2,
        category="orientation",
        priority="high",
    ),
    TemplateItem(
        "Project management tools setup",
        "Get access to Jira, Confluence, or other project management tools. Understand ticketing workflow.",
        due_in_days=3,
        category="it_setup",
        priority="medium",
    ),
)

OFFBOARDING_TASKS: tuple[TemplateItem, ...] = (
    TemplateItem(
        "Knowledge transfer",
        "Document ongoing work and hand over responsibilities to the designated colleague",
        due_in_days=7,
        category="handover",
        priority="high",
    ),
    TemplateItem(
        "Return company assets",
        "Return laptop, access cards, keys and any other company equipment",
        due_in_days=10,
        category="assets",
        priority="high",
    ),
    TemplateItem(
        "Revoke system access",
        "Disable accounts, email and application access on the last working day",
        due_in_days=10,
        category="it_setup",
        priority="high",
    ),
    TemplateItem(
        "Exit interview",
        "Schedule and hold the exit interview with HR",
        due_in_days=5,
        category="hr",
        priority="medium",
    ),
    TemplateItem(
        "Final settlement",
        "Process final pay, leave encashment and benefits termination",
        due_in_days=14,
        category="finance",
        priority="medium",
    ),
)

# Fixed list used by the onboarding wizard's final step.
WIZARD_TASKS: tuple[TemplateItem, ...] = (
    TemplateItem("Complete HR documentation", due_in_days=3),
    TemplateItem("IT equipment setup", due_in_days=1),
    TemplateItem("Office tour and introductions", due_in_days=2),
    TemplateItem("Review company policies", due_in_days=5),
    TemplateItem("Set up email and accounts", due_in_days=1),
)

TECHNICAL_KEYWORDS = (
    "developer",
    "engineer",
    "programmer",
    "architect",
    "devops",
    "qa",
    "tester",
    "analyst",
    "technical",
    "software",
    "data",
)
SALES_KEYWORDS = (
    "sales",
    "account",
    "business development",
    "bd",
    "representative",
    "executive",
    "manager",
    "director",
    "consultant",
)
HR_KEYWORDS = ("hr", "human resource", "recruiter", "talent", "people")
FINANCE_KEYWORDS = (
    "finance",
    "accounting",
    "accountant",
    "financial",
    "controller",
    "auditor",
    "cfo",
    "treasurer",
)
ENGINEERING_DEPARTMENTS = frozenset({"Engineering", "IT"})


def _matches(designation: str | None, keywords: tuple[str, ...]) -> bool:
    if not designation:
        return False
    value = designation.lower()
    return any(keyword in value for keyword in keywords)


class DefaultTaskTemplates:
    """Builds the default task list for a subject and case kind."""

    def for_subject(self, kind: CaseKind, subject: SubjectRecord) -> list[TemplateItem]:
        """Return ordered template items for a new case of kind about subject."""
        if kind == CaseKind.OFFBOARDING:
            return list(OFFBOARDING_TASKS)
        return self.onboarding_tasks(subject.department, subject.designation)

    def onboarding_tasks(
        self, department: str | None, designation: str | None
    ) -> list[TemplateItem]:
        """Common tasks, then at most one role set, then department extras.

        Role sets are checked in order technical, sales, HR, finance; the
        first match wins. HR and finance also match on department name.
        """
        items = list(COMMON_TASKS)
        if _matches(designation, TECHNICAL_KEYWORDS):
            items.extend(TECHNICAL_TASKS)
        elif _matches(designation, SALES_KEYWORDS):
            items.extend(SALES_TASKS)
        elif _matches(designation, HR_KEYWORDS) or department == "Human Resources":
            items.extend(HR_TASKS)
        elif _matches(designation, FINANCE_KEYWORDS) or department == "Finance":
            items.extend(FINANCE_TASKS)

        if department in ENGINEERING_DEPARTMENTS:
            items.extend(ENGINEERING_DEPARTMENT_TASKS)
        return items

    def wizard_tasks(self) -> list[TemplateItem]:
        """Return the fixed task list for wizard-created onboarding cases."""
        return list(WIZARD_TASKS)
