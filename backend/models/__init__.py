# Import every model so Base.metadata knows all tables
from models.users import User, UserType
from models.product import Product
from models.employee import Employee
from models.stock import Stock
from models.transaction import IncomingTransaction, OutgoingTransaction
from models.log import Log
