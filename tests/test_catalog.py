import threading

from zest.catalog import CatalogLoader, search_restaurants
from zest.models import MenuItem, Restaurant


def test_results_are_delivered_on_the_owner_thread():
    owner = threading.get_ident()
    fetch_threads = []
    delivered = []

    def fetch(restaurant_id):
        fetch_threads.append(threading.get_ident())
        return [MenuItem(item_id=1, restaurant_id=restaurant_id, name="Whopper", price=85)]

    def on_loaded(restaurant_id, items):
        delivered.append((threading.get_ident(), restaurant_id, [i.name for i in items]))

    with CatalogLoader(fetch=fetch) as loader:
        loader.request_menu(1, on_loaded).result()
        assert fetch_threads and fetch_threads[0] != owner
        # done-callbacks may still be running right after result()
        loader.shutdown()
        assert loader.deliver_ready() == 1

    assert delivered == [(owner, 1, ["Whopper"])]


def test_failed_fetch_delivers_nothing():
    def fetch(restaurant_id):
        raise RuntimeError("catalog offline")

    with CatalogLoader(fetch=fetch) as loader:
        future = loader.request_menu(1, lambda *_: None)
        assert isinstance(future.exception(), RuntimeError)
        loader.shutdown()
        assert loader.deliver_ready() == 0


def test_menu_from_database(db):
    from zest import persistence

    persistence.seed_demo_catalog()
    kfc = search_restaurants(persistence.fetch_restaurants(), "kfc")[0]
    loaded = {}
    with CatalogLoader() as loader:
        loader.request_menu(kfc.restaurant_id, loaded.__setitem__).result()
        loader.shutdown()
        loader.deliver_ready()
    assert [i.name for i in loaded[kfc.restaurant_id]] == ["Mighty Bucket", "Rizo"]


def test_search_restaurants():
    restaurants = [Restaurant(1, "Burger King"), Restaurant(2, "Pizza Hut"), Restaurant(3, "KFC")]
    assert search_restaurants(restaurants, "") == restaurants
    assert search_restaurants(restaurants, None) == restaurants
    assert search_restaurants(restaurants, "  PIZZA ") == [restaurants[1]]
    assert search_restaurants(restaurants, "sushi") == []
