import pytest
from decimal import Decimal
import uuid

from config import TestingConfig
from erplite import create_app
from erplite.database import get_session, create_schema
from erplite.models import Profile, Business, Product, Employee
from erplite.services.auth_service import issue_access_token


@pytest.fixture(scope='function')
def app():
    """Create application instance for testing (fresh in-memory database)."""
    app = create_app(TestingConfig)
    with app.app_context():
        create_schema()
        yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session shared with the handlers under test."""
    session = get_session()
    yield session
    session.rollback()
    session.close()


def _make_business(session, label):
    suffix = str(uuid.uuid4())[:8]
    owner = Profile(
        email=f'{label}-{suffix}@test.com',
        full_name=f'Owner {label}',
        active=True
    )
    session.add(owner)
    session.flush()

    business = Business(name=f'Business {label} {suffix}', owner_id=owner.id)
    session.add(business)
    session.flush()

    owner.business_id = business.id
    session.commit()
    return owner, business


@pytest.fixture(scope='function')
def owner1_and_business1(session):
    return _make_business(session, 'one')


@pytest.fixture(scope='function')
def owner2_and_business2(session):
    return _make_business(session, 'two')


@pytest.fixture(scope='function')
def owner1(owner1_and_business1):
    """Owner profile of business1."""
    return owner1_and_business1[0]


@pytest.fixture(scope='function')
def business1(owner1_and_business1):
    """First test tenant."""
    return owner1_and_business1[1]


@pytest.fixture(scope='function')
def owner2(owner2_and_business2):
    """Owner profile of business2."""
    return owner2_and_business2[0]


@pytest.fixture(scope='function')
def business2(owner2_and_business2):
    """Second test tenant for isolation tests."""
    return owner2_and_business2[1]


@pytest.fixture(scope='function')
def cashier1(session, business1):
    """Staff profile attached to business1 (not its owner)."""
    suffix = str(uuid.uuid4())[:8]
    cashier = Profile(
        email=f'cashier-{suffix}@test.com',
        full_name='Cashier One',
        business_id=business1.id,
        active=True
    )
    session.add(cashier)
    session.commit()
    return cashier


def _make_product(session, business, name, price, quantity, category='General'):
    product = Product(
        business_id=business.id,
        name=name,
        sku=f'SKU-{str(uuid.uuid4())[:8]}',
        category=category,
        buying_price=Decimal('1.00'),
        selling_price=Decimal(str(price)),
        quantity=quantity,
        low_stock_limit=5
    )
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def product_p1(session, business1):
    """Product priced 10.00 with 50 units on hand (business1)."""
    return _make_product(session, business1, 'Coffee beans', '10.00', 50, category='Grocery')


@pytest.fixture(scope='function')
def product_p2(session, business1):
    """Product priced 5.00 with 20 units on hand (business1)."""
    return _make_product(session, business1, 'Milk', '5.00', 20, category='Dairy')


@pytest.fixture(scope='function')
def product_low_stock(session, business1):
    """Product with a single unit on hand (business1)."""
    return _make_product(session, business1, 'Last croissant', '3.50', 1, category='Bakery')


@pytest.fixture(scope='function')
def product_tenant2(session, business2):
    """Product of business2."""
    return _make_product(session, business2, 'Other tenant tea', '7.00', 30)


@pytest.fixture(scope='function')
def employee1(session, business1):
    """Employee of business1."""
    employee = Employee(
        business_id=business1.id,
        full_name='Employee One',
        role='cashier',
        status='active'
    )
    session.add(employee)
    session.commit()
    return employee


@pytest.fixture(scope='function')
def employee_tenant2(session, business2):
    """Employee of business2."""
    employee = Employee(business_id=business2.id, full_name='Employee Two')
    session.add(employee)
    session.commit()
    return employee


@pytest.fixture(scope='function')
def auth_headers(app, owner1):
    """Bearer headers for owner1."""
    return {'Authorization': f'Bearer {issue_access_token(owner1.id)}'}


@pytest.fixture(scope='function')
def auth_headers_tenant2(app, owner2):
    """Bearer headers for owner2."""
    return {'Authorization': f'Bearer {issue_access_token(owner2.id)}'}
