from __future__ import annotations

import argparse
import logging

from lesson_shop.checkout import CheckoutCoordinator
from lesson_shop.client import LessonServiceClient
from lesson_shop.config import ShopConfig
from lesson_shop.errors import ShopError
from lesson_shop.session import ShopSession


def main() -> None:
    # строки лога уже несут префикс [checkout=N], время и уровень не нужны
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    config = ShopConfig.from_env()

    p = argparse.ArgumentParser(description="Load the lesson catalog, fill a cart and place one order.")
    p.add_argument("--base-url", type=str, default=config.base_url)
    p.add_argument("--timeout", type=float, default=config.timeout)
    p.add_argument("--lesson", action="append", default=[], help="Id урока; повторить для количества > 1")
    p.add_argument("--first-name", type=str, default="")
    p.add_argument("--last-name", type=str, default="")
    p.add_argument("--address", type=str, default="")
    p.add_argument("--city", type=str, default="")
    p.add_argument("--zip", type=str, default="")
    p.add_argument("--state", type=str, default="")
    p.add_argument("--type", type=str, default="")
    p.add_argument("--search", type=str, default="", help="Только показать каталог с фильтром")
    p.add_argument("--sort", type=str, default="title")
    args = p.parse_args()

    client = LessonServiceClient(ShopConfig(base_url=args.base_url, timeout=args.timeout))
    session = ShopSession()
    try:
        session.load_catalog(client)
    except ShopError as e:
        raise SystemExit(f"catalog: {e}")

    print("\n=== LESSONS ===")
    for lesson in session.catalog.browse(args.search, args.sort):
        print(f"{lesson.id}: {lesson.title} @ {lesson.location} price={lesson.price} available={lesson.available_inventory}")

    if not args.lesson:
        return

    for lesson_id in args.lesson:
        try:
            session.add_to_cart(lesson_id)
        except (KeyError, ShopError) as e:
            print(f"skip {lesson_id}: {e}")

    c = session.customer
    c.first_name, c.last_name, c.address = args.first_name, args.last_name, args.address
    c.city, c.zip, c.state, c.type = args.city, args.zip, args.state, args.type

    session.toggle_checkout()
    result = CheckoutCoordinator(session, client).checkout()

    print("\n=== RESULT ===")
    print("state:", result.state.value)
    print("message:", result.message)
    print("reconciliation:", result.reconciliation)
    print("cart items:", session.cart.total_item_count())


if __name__ == "__main__":
    main()
