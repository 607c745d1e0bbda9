"""
API Router for lobbies, ingredients, recipes and votes.
"""

from fastapi import APIRouter, Depends, Request

from backend.lobby import LobbyStore
from backend.recipe_service import RecipeService
from snapdish.schemas import (
    CreateLobbyRequest,
    CreateLobbyResponse,
    IngredientsPayload,
    JoinLobbyRequest,
    JoinLobbyResponse,
    MembersResponse,
    MessageResponse,
    RecipesResponse,
    VisionRequest,
    VoteRequest,
    VotesResponse,
)

api_router = APIRouter()


def get_store(request: Request) -> LobbyStore:
    return request.app.state.lobby_store


def get_recipe_service(request: Request) -> RecipeService:
    return request.app.state.recipe_service


@api_router.post("/lobby/create", response_model=CreateLobbyResponse, tags=["Lobby"])
async def create_lobby(body: CreateLobbyRequest, store: LobbyStore = Depends(get_store)):
    lobby, host = await store.create_lobby(body.host_name)
    return CreateLobbyResponse(message="Lobby created.", lobby=lobby, host=host)


@api_router.post("/lobby/join", response_model=JoinLobbyResponse, tags=["Lobby"])
async def join_lobby(body: JoinLobbyRequest, store: LobbyStore = Depends(get_store)):
    lobby, user = await store.join_lobby(body.name, body.code)
    return JoinLobbyResponse(message="Joined lobby.", lobby=lobby, user=user)


@api_router.get("/lobby/{lobby_id}/members", response_model=MembersResponse, tags=["Lobby"])
async def list_members(lobby_id: str, store: LobbyStore = Depends(get_store)):
    return MembersResponse(members=await store.members(lobby_id))


@api_router.get("/lobby/{lobby_id}/ingredients", response_model=IngredientsPayload, tags=["Ingredients"])
async def get_ingredients(lobby_id: str, store: LobbyStore = Depends(get_store)):
    return IngredientsPayload(ingredients=await store.ingredients(lobby_id))


@api_router.post("/lobby/{lobby_id}/ingredients", response_model=IngredientsPayload, tags=["Ingredients"])
async def add_ingredients(
    lobby_id: str, body: IngredientsPayload, store: LobbyStore = Depends(get_store)
):
    return IngredientsPayload(ingredients=await store.add_ingredients(lobby_id, body.ingredients))


@api_router.delete("/lobby/{lobby_id}/ingredients", response_model=IngredientsPayload, tags=["Ingredients"])
async def remove_ingredients(
    lobby_id: str, body: IngredientsPayload, store: LobbyStore = Depends(get_store)
):
    return IngredientsPayload(ingredients=await store.remove_ingredients(lobby_id, body.ingredients))


@api_router.post(
    "/lobby/{lobby_id}/ingredients/vision", response_model=IngredientsPayload, tags=["Ingredients"]
)
async def extract_ingredients(
    lobby_id: str, body: VisionRequest, service: RecipeService = Depends(get_recipe_service)
):
    return IngredientsPayload(ingredients=await service.extract_ingredients(lobby_id, body.image_base64))


@api_router.post("/lobby/{lobby_id}/recipes/generate", response_model=RecipesResponse, tags=["Recipes"])
async def generate_recipes(
    lobby_id: str, body: IngredientsPayload, service: RecipeService = Depends(get_recipe_service)
):
    return RecipesResponse(recipes=await service.generate(lobby_id, body.ingredients))


@api_router.get("/lobby/{lobby_id}/recipes", response_model=RecipesResponse, tags=["Recipes"])
async def list_recipes(lobby_id: str, store: LobbyStore = Depends(get_store)):
    return RecipesResponse(recipes=await store.recipes(lobby_id))


@api_router.post("/lobby/{lobby_id}/vote", response_model=MessageResponse, tags=["Voting"])
async def cast_vote(lobby_id: str, body: VoteRequest, store: LobbyStore = Depends(get_store)):
    await store.cast_vote(lobby_id, body.user_id, body.recipe_id, body.direction.value)
    return MessageResponse(message="Vote recorded.")


@api_router.get("/lobby/{lobby_id}/results", response_model=VotesResponse, tags=["Voting"])
async def list_votes(lobby_id: str, store: LobbyStore = Depends(get_store)):
    return VotesResponse(votes=await store.votes(lobby_id))
