"""
Database Setup Script
Creates all tables and seeds demo procurement data
"""

import sys
from pathlib import Path
from datetime import datetime, timedelta
from sqlalchemy.orm import Session

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from procurement.config.database import Base, SessionLocal, engine
from procurement.models.approval_rule import ApprovalRule
from procurement.models.budget import Budget
from procurement.models.notification import Notification  # noqa: F401
from procurement.models.purchase_order import PurchaseOrder, POStatus
from procurement.models.requisition import Requisition, RequisitionItem, RequisitionStatus, ItemCategory
from procurement.models.rfq import RFQ, RfqStatus
from procurement.models.user import User, UserRole
from procurement.models.vendor import Vendor
from procurement.utils.security import get_password_hash
from procurement.utils.logger import setup_logger

logger = setup_logger()

DEMO_USERS = [
    # email, full name, role, department, password
    ("employee@example.com", "Employee A", UserRole.EMPLOYEE, "Operations", "employee123"),
    ("approver@example.com", "Manager B", UserRole.APPROVER, "Operations", "approver123"),
    ("procurement@example.com", "Citra Prasetyo", UserRole.PROCUREMENT_ADMIN, "Procurement", "procurement123"),
    ("finance@example.com", "Dito Wijaya", UserRole.FINANCE, "Finance", "finance123"),
]

DEMO_VENDORS = [
    ("Nusantara Tech Supplies", "contact@nusantaratech.co.id", "+62-21-555-1000", ItemCategory.IT, 5,
     "Jl. Sudirman Kav. 21, Jakarta", "01.234.567.8-999.000", True),
    ("Sahabat Office Mart", "sales@sahabatoffice.id", "+62-21-777-2211", ItemCategory.OFFICE, 4,
     "Jl. Gatot Subroto No. 45, Jakarta", "02.987.654.3-888.000", True),
    ("LogiXpress Indonesia", "hello@logixpress.id", "+62-21-333-9021", ItemCategory.LOGISTICS, 4,
     "Jl. Raya Bekasi Timur No. 77, Bekasi", "03.321.123.5-777.000", True),
    ("Prima IT Solutions", "marketing@primait.co.id", "+62-21-889-5512", ItemCategory.IT, 3,
     "Jl. Thamrin No. 18, Jakarta", "04.555.901.2-666.000", True),
    ("QuickFix Facility Services", "support@quickfixfacilities.id", "+62-21-889-1122", ItemCategory.FACILITIES, 5,
     "Jl. Daan Mogot No. 90, Jakarta", "05.777.888.1-555.000", True),
    ("Satria Logistics", "info@satrialogistics.id", "+62-21-665-4433", ItemCategory.LOGISTICS, 4,
     "Jl. Pelabuhan No. 7, Surabaya", "06.999.222.0-444.000", False),
]

DEMO_BUDGETS = [
    ("IT Operations 2024", "IT-OPS-001", 1_200_000_000),
    ("Facilities Upgrade 2024", "FAC-202", 600_000_000),
    ("Operations Improvements 2024", "OPS-110", 450_000_000),
    ("Logistics Fleet 2024", "LOG-450", 500_000_000),
]

DEMO_RULES = [
    ("Default approval up to 50M", {"amount_gte": 0}, ["approver", "procurement_admin"]),
    ("High value requires finance", {"amount_gte": 100_000_000}, ["approver", "finance", "procurement_admin"]),
    ("IT Cost Center special rule", {"cost_center": "IT-OPS-001", "category": "IT"}, ["approver", "finance"]),
]


def create_tables():
    """Create all database tables"""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def _steps(*roles):
    return [{"order": index, "role": role} for index, role in enumerate(roles, start=1)]


def _event(step, role, user, action, at, comment=None):
    return {
        "step": step,
        "role": role,
        "user_id": user.id if user else None,
        "action": action,
        "comment": comment,
        "at": at.isoformat()
    }


def _item(description, quantity, unit_price, category, vendor):
    return RequisitionItem(
        description=description,
        quantity=quantity,
        uom="unit",
        unit_price=unit_price,
        currency="IDR",
        category=category,
        vendor_preference_id=vendor.id
    )


def _lines(requisition):
    return [
        {
            "requisition_item_id": item.id,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "total": item.line_total
        }
        for item in requisition.items
    ]


def seed_demo_data(db: Session) -> bool:
    """
    Seed users, vendors, budgets, approval rules, requisitions, RFQs and POs

    Skips seeding when users already exist.

    Returns:
        bool: True when data was created
    """
    if db.query(User).first():
        logger.info("Users already exist, skipping demo data")
        return False

    now = datetime.utcnow()
    day = timedelta(days=1)

    users = [
        User(
            email=email,
            full_name=full_name,
            role=role,
            department=department,
            hashed_password=get_password_hash(password),
            is_active=True
        )
        for email, full_name, role, department, password in DEMO_USERS
    ]
    employee, approver, procurement_admin, finance = users
    db.add_all(users)

    vendors = [
        Vendor(
            name=name, email=email, phone=phone, category=category, rating=rating,
            address=address, tax_id=tax_id, is_active=is_active
        )
        for name, email, phone, category, rating, address, tax_id, is_active in DEMO_VENDORS
    ]
    db.add_all(vendors)

    db.add_all([
        Budget(name=name, cost_center=cost_center, amount=amount, currency="IDR", period="FY2024")
        for name, cost_center, amount in DEMO_BUDGETS
    ])

    db.add_all([
        ApprovalRule(
            name=name,
            amount_gte=conditions.get("amount_gte"),
            category=conditions.get("category"),
            cost_center=conditions.get("cost_center"),
            steps=_steps(*roles)
        )
        for name, conditions, roles in DEMO_RULES
    ])
    db.flush()

    laptops = Requisition(
        req_no="PR-2024-0001",
        requester_id=employee.id,
        department="IT",
        cost_center="IT-OPS-001",
        needed_by=now + 14 * day,
        status=RequisitionStatus.APPROVED,
        notes="Refresh equipment for new hires",
        items=[
            _item("Enterprise Laptops", 10, 25_000_000, ItemCategory.IT, vendors[0]),
            _item("Docking Stations", 10, 2_500_000, ItemCategory.IT, vendors[0]),
        ],
        approval_steps=_steps("approver", "finance"),
        approval_trail=[
            _event(0, "employee", employee, "submitted", now - 7 * day),
            _event(1, "approver", approver, "approved", now - 6 * day),
            _event(2, "finance", finance, "approved", now - 5 * day),
        ],
        created_at=now - 10 * day,
        updated_at=now - 5 * day
    )
    furniture = Requisition(
        req_no="PR-2024-0002",
        requester_id=employee.id,
        department="Facilities",
        cost_center="FAC-202",
        needed_by=now + 21 * day,
        status=RequisitionStatus.SUBMITTED,
        notes="Office expansion level 12",
        items=[
            _item("Office Chairs", 30, 1_500_000, ItemCategory.OFFICE, vendors[1]),
            _item("Standing Desks", 20, 4_500_000, ItemCategory.OFFICE, vendors[1]),
        ],
        approval_steps=_steps("approver", "procurement_admin"),
        approval_trail=[
            _event(0, "employee", employee, "submitted", now - 3 * day),
            _event(1, "approver", approver, "approved", now - 2 * day),
        ],
        created_at=now - 4 * day,
        updated_at=now - 2 * day
    )
    shelving = Requisition(
        req_no="PR-2024-0003",
        requester_id=employee.id,
        department="Operations",
        cost_center="OPS-110",
        needed_by=now + 30 * day,
        status=RequisitionStatus.DRAFT,
        items=[_item("Warehouse Shelving", 50, 1_200_000, ItemCategory.LOGISTICS, vendors[2])],
        approval_steps=[],
        approval_trail=[],
        created_at=now - day,
        updated_at=now - day
    )
    switches = Requisition(
        req_no="PR-2024-0004",
        requester_id=employee.id,
        department="IT",
        cost_center="IT-OPS-001",
        needed_by=now + 10 * day,
        status=RequisitionStatus.REJECTED,
        notes="Upgrade for network backbone",
        items=[_item("Network Switches", 5, 7_000_000, ItemCategory.IT, vendors[3])],
        approval_steps=_steps("approver"),
        approval_trail=[
            _event(0, "employee", employee, "submitted", now - 12 * day),
            _event(1, "approver", None, "returned", now - 11 * day,
                   comment="Please provide justification for upgrade."),
        ],
        created_at=now - 13 * day,
        updated_at=now - 11 * day
    )
    vans = Requisition(
        req_no="PR-2024-0005",
        requester_id=employee.id,
        department="Logistics",
        cost_center="LOG-450",
        needed_by=now + 5 * day,
        status=RequisitionStatus.CONVERTED,
        notes="Leasing for new distribution channel",
        items=[_item("Delivery Vans Leasing", 3, 90_000_000, ItemCategory.LOGISTICS, vendors[5])],
        approval_steps=_steps("approver", "finance", "procurement_admin"),
        approval_trail=[
            _event(0, "employee", employee, "submitted", now - 20 * day),
            _event(1, "approver", approver, "approved", now - 19 * day),
            _event(2, "finance", finance, "approved", now - 18 * day),
            _event(3, "procurement_admin", procurement_admin, "approved", now - 17 * day),
        ],
        created_at=now - 25 * day,
        updated_at=now - 17 * day
    )
    requisitions = [laptops, furniture, shelving, switches, vans]
    for requisition in requisitions:
        requisition.total = requisition.calculate_total()
    db.add_all(requisitions)
    db.flush()

    quotes = []
    for index, vendor in enumerate(vendors[1:4]):
        markup = 1 + index * 0.05
        subtotal = furniture.total * markup
        taxes = furniture.total * 0.11
        shipping = 500_000 * (index + 1)
        quotes.append({
            "vendor_id": str(vendor.id),
            "vendor_name": vendor.name,
            "vendor_email": vendor.email,
            "vendor_company": vendor.name,
            "items": [
                {
                    "requisition_item_id": item.id,
                    "unit_price": item.unit_price * markup,
                    "currency": item.currency,
                    "lead_time_days": 7 + index * 2,
                    "notes": None
                }
                for item in furniture.items
            ],
            "subtotal": subtotal,
            "taxes": taxes,
            "shipping": shipping,
            "total": subtotal + taxes + shipping,
            "lead_time_days": 7 + index * 2,
            "payment_terms": "30 days",
            "notes": "Best lead time" if index == 0 else None,
            "submitted_at": (now - timedelta(hours=12 * (index + 1))).isoformat(),
            "source": "vendor"
        })

    db.add_all([
        RFQ(
            rfq_no="RFQ-2024-010",
            requisition_id=laptops.id,
            vendor_ids=[str(vendor.id) for vendor in vendors[0:3]],
            status=RfqStatus.DRAFT,
            quotes=[],
            due_date=now + 7 * day,
            created_at=now
        ),
        RFQ(
            rfq_no="RFQ-2024-011",
            requisition_id=furniture.id,
            vendor_ids=[str(vendor.id) for vendor in vendors[1:4]],
            status=RfqStatus.RECEIVED,
            quotes=quotes,
            due_date=now - day,
            created_at=now - 5 * day
        ),
    ])

    db.add_all([
        PurchaseOrder(
            po_no="PO-2024-020",
            vendor_id=vendors[0].id,
            status=POStatus.DRAFT,
            lines=_lines(laptops),
            total=laptops.total,
            currency="IDR",
            terms="Delivery within 14 days",
            linked_requisition_ids=[laptops.id],
            created_at=now
        ),
        PurchaseOrder(
            po_no="PO-2024-021",
            vendor_id=vendors[1].id,
            status=POStatus.ISSUED,
            lines=_lines(vans),
            total=vans.total,
            currency="IDR",
            terms="Delivery within 30 days",
            linked_requisition_ids=[vans.id],
            created_at=now
        ),
        PurchaseOrder(
            po_no="PO-2024-022",
            vendor_id=vendors[2].id,
            status=POStatus.CLOSED,
            lines=[{
                "requisition_item_id": laptops.items[0].id,
                "quantity": 10,
                "unit_price": 1_500_000,
                "total": 15_000_000
            }],
            total=15_000_000,
            currency="IDR",
            terms="Delivered complete",
            linked_requisition_ids=[laptops.id],
            created_at=now - 30 * day
        ),
    ])

    db.commit()
    logger.info(
        f"Demo data created: {len(users)} users, {len(vendors)} vendors, "
        f"{len(requisitions)} requisitions, 2 RFQs, 3 POs"
    )
    return True


def init_db():
    """Create tables and seed demo data in a fresh session"""
    create_tables()
    db = SessionLocal()
    try:
        return seed_demo_data(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def print_setup_summary():
    """Print setup summary and credentials"""
    print("\n" + "=" * 70)
    print("DATABASE SETUP COMPLETED")
    print("=" * 70)

    print("\nTEST USER CREDENTIALS:")
    for email, full_name, role, _department, password in DEMO_USERS:
        print(f"  {role.value:<18} {email:<28} {password}")

    print("\nSAMPLE DATA:")
    print("  PR-2024-0001  IT-OPS-001  Rp 275,000,000  approved")
    print("  PR-2024-0002  FAC-202     Rp 135,000,000  submitted, waiting on procurement_admin")
    print("  PR-2024-0003  OPS-110     Rp 60,000,000   draft")
    print("  PR-2024-0004  IT-OPS-001  Rp 35,000,000   rejected")
    print("  PR-2024-0005  LOG-450     Rp 270,000,000  converted")

    print("\nNEXT STEPS:")
    print("  1. uvicorn procurement.main:app --reload")
    print("  2. API documentation: http://localhost:8000/api/docs")
    print("\n" + "=" * 70 + "\n")


def main():
    """Main setup function"""
    print("=" * 70)
    print("PROCUREMENT APPROVAL SYSTEM - DATABASE SETUP")
    print("=" * 70)

    try:
        created = init_db()
        if created:
            print_setup_summary()
        else:
            print("Database already contains data, nothing to seed")
    except Exception as e:
        print(f"\nDatabase setup failed: {str(e)}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
