import os
import sys
import logging
from datetime import date, timedelta

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from dotenv import load_dotenv

from config import settings
from database import SessionLocal, init_db
from models.users import User, UserType
from models.product import Product
from models.employee import Employee
from services.transactions import TransactionService
from utils.hashing import get_password_hash

load_dotenv()
logger = logging.getLogger("populate_db")

# Configuration
ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@clinic.com")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")

PRODUCTS = ["Gauze pads", "Surgical gloves", "Saline 0.9% 500ml", "Syringe 5ml", "Ibuprofen 400mg"]

EMPLOYEES = [
    ("Anna Kowalska", "surgery", "+48 600 100 200"),
    ("John Smith", "pharmacy", "+44 7700 900123"),
    ("Maria Garcia", "emergency", "+34 612 345 678"),
]

# (product, quantity, days until expiry)
RECEIPTS = [
    ("Gauze pads", 200, 365),
    ("Surgical gloves", 500, 180),
    ("Surgical gloves", 300, 400),
    ("Saline 0.9% 500ml", 120, 90),
    ("Syringe 5ml", 1000, 720),
    ("Ibuprofen 400mg", 60, 30),
    ("Ibuprofen 400mg", 90, 240),
]
# End Configuration


def seed():
    init_db()
    session = SessionLocal()
    try:
        admin = session.query(User).filter(User.email == ADMIN_EMAIL).first()
        if not admin:
            admin = User(email=ADMIN_EMAIL, password_hash=get_password_hash(ADMIN_PASSWORD),
                         type=UserType.ADMIN, first_name="Clinic", last_name="Admin")
            session.add(admin)
            session.commit()
            logger.info("Created admin user %s", ADMIN_EMAIL)

        existing = {p.product_name for p in session.query(Product).all()}
        for name in PRODUCTS:
            if name not in existing:
                session.add(Product(product_name=name))

        for name, department, phone in EMPLOYEES:
            found = session.query(Employee).filter(Employee.employee_name == name, Employee.phone_number == phone).first()
            if not found:
                session.add(Employee(employee_name=name, department=department.upper(), phone_number=phone))
        session.commit()

        # Stock only ever enters through the ledger
        service = TransactionService(session, max_retries=settings.LEDGER_MAX_RETRIES, user_id=admin.id)
        if not existing:
            today = date.today()
            for name, quantity, days in RECEIPTS:
                service.record_incoming(name, quantity, today + timedelta(days=days))
            logger.info("Received %d seed deliveries", len(RECEIPTS))
    finally:
        session.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed()
    print("Seeding complete.")
