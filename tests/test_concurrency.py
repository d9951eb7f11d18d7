import threading

import pytest
from sqlalchemy.orm import sessionmaker

from conftest import make_order, make_product, stock_of
from pos_backend.database import supports_transactions
from pos_backend.errors import ErrorKind, PosError
from pos_backend.models.order import Order
from pos_backend.services import order_service

# Transactional path and compensating path against the same race
ENGINES = ["file_engine", "file_autocommit_engine"]


@pytest.fixture(params=ENGINES)
def race_engine(request):
    return request.getfixturevalue(request.param)


def _race(engine, orders):
    """Submit every order from its own thread at the same moment.

    Returns ``("ok", index)`` or ``(kind, detail)`` per order, in finishing order.
    """
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    barrier = threading.Barrier(len(orders))
    results = []
    lock = threading.Lock()

    def worker(index):
        session = Session()
        try:
            barrier.wait()
            order_service.create_order(session, orders[index])
            outcome = ("ok", index)
        except PosError as e:
            outcome = (e.kind, e.detail)
        finally:
            session.close()
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(len(orders))]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return results


def test_race_engines_cover_both_paths(file_engine, file_autocommit_engine):
    assert supports_transactions(file_engine)
    assert not supports_transactions(file_autocommit_engine)


def test_two_orders_racing_for_the_last_units(race_engine):
    setup = sessionmaker(bind=race_engine)()
    product = make_product(setup, stock=5)
    quantities = [3, 4]

    results = _race(race_engine, [make_order([(product, q)]) for q in quantities])

    successes = [r for r in results if r[0] == "ok"]
    failures = [r for r in results if r[0] != "ok"]
    assert len(successes) == 1
    assert len(failures) == 1
    kind, detail = failures[0]
    assert kind == ErrorKind.INSUFFICIENT_STOCK
    assert (detail["available"], detail["requested"]) in {(2, 4), (1, 3)}
    assert stock_of(setup, product.id) == 5 - quantities[successes[0][1]]
    setup.close()


def test_stock_never_goes_negative(race_engine):
    setup = sessionmaker(bind=race_engine)()
    product = make_product(setup, stock=10)

    results = _race(race_engine, [make_order([(product, 3)]) for _ in range(6)])

    assert sum(1 for r in results if r[0] == "ok") == 3
    assert stock_of(setup, product.id) == 1
    assert setup.query(Order).count() == 3
    setup.close()


def test_losing_orders_give_back_their_first_item(race_engine):
    setup = sessionmaker(bind=race_engine)()
    coffee = make_product(setup, name="Coffee", stock=10)
    bagel = make_product(setup, name="Bagel", stock=2)

    results = _race(race_engine, [make_order([(coffee, 1), (bagel, 1)]) for _ in range(4)])

    assert sum(1 for r in results if r[0] == "ok") == 2
    assert all(r[0] == ErrorKind.INSUFFICIENT_STOCK for r in results if r[0] != "ok")
    assert stock_of(setup, coffee.id) == 8
    assert stock_of(setup, bagel.id) == 0
    assert setup.query(Order).count() == 2
    setup.close()
