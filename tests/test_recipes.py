"""Tests for recipes and their ingredient lines."""

import pytest

from larder.api.pagination import MAX_PAGE
from larder.models.ingredient import Ingredient
from larder.models.recipe import RecipeIngredient


@pytest.fixture
def recipe(client, auth_headers):
    response = client.post(
        "/recipes",
        json={"title": "Pancakes", "description": "Sunday breakfast", "servings": 2},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_create_recipe(client, auth_headers):
    response = client.post(
        "/recipes",
        json={"title": "  Carbonara  ", "prepTimeMinutes": 10, "cookTimeMinutes": 15},
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["title"] == "Carbonara"
    assert data["userId"] == auth_headers.user_id
    assert data["isPublic"] is False
    assert data["ingredients"] == []


@pytest.mark.parametrize("title", ["A", "  A ", ""])
def test_create_recipe_rejects_short_title(client, auth_headers, title):
    response = client.post("/recipes", json={"title": title}, headers=auth_headers)
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"].startswith("title:")


def test_create_recipe_accepts_two_characters(client, auth_headers):
    response = client.post("/recipes", json={"title": "AB"}, headers=auth_headers)
    assert response.status_code == 201


def test_get_recipe(client, auth_headers, recipe):
    response = client.get(f"/recipes/{recipe['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["description"] == "Sunday breakfast"


def test_get_missing_recipe(client, auth_headers):
    response = client.get("/recipes/9999", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"] == {"code": "NOT_FOUND", "message": "Recipe not found"}


def test_other_users_recipe_is_not_found(client, recipe, other_auth_headers):
    url = f"/recipes/{recipe['id']}"
    assert client.get(url, headers=other_auth_headers).status_code == 404
    assert client.patch(url, json={"title": "Mine"}, headers=other_auth_headers).status_code == 404
    assert client.delete(url, headers=other_auth_headers).status_code == 404
    assert (
        client.get(f"{url}/ingredients", headers=other_auth_headers).status_code == 404
    )


def test_update_recipe(client, auth_headers, recipe):
    response = client.patch(
        f"/recipes/{recipe['id']}",
        json={"title": "Fluffy Pancakes", "description": None, "isPublic": True},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["title"] == "Fluffy Pancakes"
    assert data["description"] is None
    assert data["isPublic"] is True
    # Fields not sent are left alone
    assert data["servings"] == 2


def test_update_recipe_without_fields(client, auth_headers, recipe):
    response = client.patch(f"/recipes/{recipe['id']}", json={}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "No fields to update"


def test_update_recipe_rejects_null_title(client, auth_headers, recipe):
    response = client.patch(f"/recipes/{recipe['id']}", json={"title": None}, headers=auth_headers)
    assert response.status_code == 400
    assert "title cannot be null" in response.json()["error"]["message"]


def test_delete_recipe_removes_lines(client, db, auth_headers, recipe):
    client.post(
        f"/recipes/{recipe['id']}/ingredients",
        json={"ingredientName": "Flour", "quantity": 200, "unit": "g"},
        headers=auth_headers,
    )

    response = client.delete(f"/recipes/{recipe['id']}", headers=auth_headers)
    assert response.status_code == 204
    assert client.get(f"/recipes/{recipe['id']}", headers=auth_headers).status_code == 404
    assert db.query(RecipeIngredient).count() == 0
    # The catalog entry outlives the recipe
    assert db.query(Ingredient).filter(Ingredient.name == "Flour").count() == 1


def test_list_recipes_is_scoped_and_paginated(client, auth_headers, other_auth_headers):
    for i in range(3):
        client.post("/recipes", json={"title": f"Recipe {i}"}, headers=auth_headers)
    client.post("/recipes", json={"title": "Not yours"}, headers=other_auth_headers)

    response = client.get("/recipes?page=1&pageSize=2", headers=auth_headers)
    assert response.status_code == 200
    page = response.json()["data"]
    assert page["total"] == 3
    assert page["page"] == 1
    assert page["pageSize"] == 2
    assert len(page["items"]) == 2
    # Newest first
    assert page["items"][0]["title"] == "Recipe 2"
    assert "ingredients" not in page["items"][0]

    response = client.get("/recipes?page=2&pageSize=2", headers=auth_headers)
    assert [r["title"] for r in response.json()["data"]["items"]] == ["Recipe 0"]


def test_list_recipes_clamps_pagination(client, auth_headers, recipe):
    response = client.get("/recipes?page=0&pageSize=1000", headers=auth_headers)
    assert response.status_code == 200
    page = response.json()["data"]
    assert page["page"] == 1
    assert page["pageSize"] == 100

    response = client.get("/recipes?pageSize=-5", headers=auth_headers)
    assert response.json()["data"]["pageSize"] == 1


def test_list_recipes_clamps_huge_page(client, auth_headers, recipe):
    response = client.get("/recipes?page=100000000000000000000", headers=auth_headers)
    assert response.status_code == 200
    page = response.json()["data"]
    assert page["page"] == MAX_PAGE
    assert page["items"] == []
    assert page["total"] == 1


def test_search_recipes_ignores_case(client, auth_headers, recipe):
    response = client.get("/recipes?search=PANCAKE", headers=auth_headers)
    assert [r["title"] for r in response.json()["data"]["items"]] == ["Pancakes"]


def test_search_recipes(client, auth_headers, recipe):
    client.post("/recipes", json={"title": "Omelette"}, headers=auth_headers)

    response = client.get("/recipes?search=breakfast", headers=auth_headers)
    assert [r["title"] for r in response.json()["data"]["items"]] == ["Pancakes"]

    response = client.get("/recipes?search=Omel", headers=auth_headers)
    assert [r["title"] for r in response.json()["data"]["items"]] == ["Omelette"]


# --- Ingredient lines ---


def test_add_ingredient_by_new_name_creates_catalog_entry(client, db, auth_headers, recipe):
    response = client.post(
        f"/recipes/{recipe['id']}/ingredients",
        json={"ingredientName": "  Buttermilk ", "quantity": 250, "unit": "ml", "note": "cold"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["ingredientName"] == "Buttermilk"
    assert data["quantity"] == 250
    assert data["unit"] == "ml"
    assert data["note"] == "cold"

    assert db.query(Ingredient).count() == 1
    assert db.query(RecipeIngredient).count() == 1
    ingredient = db.query(Ingredient).one()
    assert ingredient.name == "Buttermilk"
    assert ingredient.default_unit == "ml"


def test_add_ingredient_by_known_name_reuses_default_unit(client, db, auth_headers, recipe):
    client.post(
        "/ingredients",
        json={"name": "Flour", "category": "Baking", "defaultUnit": "g"},
        headers=auth_headers,
    )

    response = client.post(
        f"/recipes/{recipe['id']}/ingredients",
        json={"ingredientName": "Flour", "quantity": 200},
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["unit"] == "g"
    assert data["ingredientCategory"] == "Baking"
    assert db.query(Ingredient).count() == 1


def test_add_ingredient_by_id(client, auth_headers, recipe):
    ingredient = client.post(
        "/ingredients", json={"name": "Eggs"}, headers=auth_headers
    ).json()["data"]

    response = client.post(
        f"/recipes/{recipe['id']}/ingredients",
        json={"ingredientId": ingredient["id"], "quantity": 2, "unit": "pcs"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["ingredientId"] == ingredient["id"]


def test_add_ingredient_with_unknown_id(client, auth_headers, recipe):
    response = client.post(
        f"/recipes/{recipe['id']}/ingredients",
        json={"ingredientId": 9999, "quantity": 1},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "ingredientId: ingredient 9999 does not exist"


def test_add_ingredient_requires_reference(client, auth_headers, recipe):
    response = client.post(
        f"/recipes/{recipe['id']}/ingredients",
        json={"ingredientName": " x ", "quantity": 1},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert "ingredientId or ingredientName is required" in response.json()["error"]["message"]


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_ingredient_rejects_non_positive_quantity(client, auth_headers, recipe, quantity):
    response = client.post(
        f"/recipes/{recipe['id']}/ingredients",
        json={"ingredientName": "Sugar", "quantity": quantity},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"].startswith("quantity:")


def test_add_same_ingredient_twice_is_conflict(client, db, auth_headers, recipe):
    url = f"/recipes/{recipe['id']}/ingredients"
    first = client.post(url, json={"ingredientName": "Milk", "quantity": 1}, headers=auth_headers)
    assert first.status_code == 201

    second = client.post(url, json={"ingredientName": "Milk", "quantity": 2}, headers=auth_headers)
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "CONFLICT"
    assert db.query(RecipeIngredient).count() == 1


def test_list_update_and_delete_ingredient_lines(client, auth_headers, recipe):
    url = f"/recipes/{recipe['id']}/ingredients"
    line = client.post(
        url, json={"ingredientName": "Butter", "quantity": 50, "unit": "g"}, headers=auth_headers
    ).json()["data"]

    response = client.get(url, headers=auth_headers)
    assert response.status_code == 200
    assert [item["id"] for item in response.json()["data"]["items"]] == [line["id"]]

    response = client.patch(
        f"{url}/{line['id']}", json={"quantity": 75, "note": "softened"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["quantity"] == 75
    assert response.json()["data"]["note"] == "softened"

    response = client.patch(f"{url}/{line['id']}", json={"quantity": None}, headers=auth_headers)
    assert response.status_code == 400

    response = client.delete(f"{url}/{line['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = client.get(f"/recipes/{recipe['id']}", headers=auth_headers)
    assert response.json()["data"]["ingredients"] == []


def test_ingredient_line_of_another_recipe_is_not_found(client, auth_headers, recipe):
    other = client.post("/recipes", json={"title": "Waffles"}, headers=auth_headers).json()["data"]
    line = client.post(
        f"/recipes/{other['id']}/ingredients",
        json={"ingredientName": "Flour", "quantity": 100},
        headers=auth_headers,
    ).json()["data"]

    response = client.delete(
        f"/recipes/{recipe['id']}/ingredients/{line['id']}", headers=auth_headers
    )
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Recipe ingredient not found"
