from models.users import User, AccessToken
from models.tariffs import Tariff
from models.customers import Customer
from models.bills import Bill
from models.payments import Payment
