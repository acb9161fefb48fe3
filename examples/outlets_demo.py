"""
Example showing how a rendering layer drives outletroute with outlets and plugins.
"""

from __future__ import annotations

from outletroute import HashHistory, MatchType, Router


def build_router() -> Router:
    events = []

    routes = [
        {
            "path": "/users",
            "outlet": "users",
            "onEnter": lambda: events.append("users:enter"),
            "onExit": lambda: events.append("users:exit"),
            "children": [
                {"path": "{user_id}/edit?{tab}", "outlet": "user-edit", "defaultParams": {"tab": "profile"}},
                {"path": "{user_id}", "outlet": "user"},
            ],
        },
        {"path": "search?{q}", "outlet": "search"},
        {"path": "/", "outlet": "home", "defaultRoute": True},
    ]
    router = Router(routes, history=HashHistory()).plug("logging", flags="print:on")
    router.on("navstart", lambda event: events.append(f"navstart:{event.path}"))
    return router


if __name__ == "__main__":
    app = build_router()
    users = app.outlet("users", main="UsersPage", index="UsersList", error="NotFound")

    app.set_path("users")
    assert users.select() == "UsersList"

    app.set_path("users/42")
    assert app.get_outlet("users").type is MatchType.PARTIAL
    assert app.get_outlet("user").params["user_id"] == "42"
    print(app.link("user-edit", {"user_id": "42"}))  # -> #/users/42/edit?tab=profile
    print(app.link("search"))  # -> None, no value for q

    app.set_path("users/42/unknown")
    print(users.select(), users.properties())
