from campaign_manager.database import crud
from campaign_manager.database.init_db import SAMPLE_CAMPAIGN, initialize_database
from campaign_manager.scripts import create_user


def test_create_user_script(db):
    assert create_user.main(["Ada", "ada@example.com", "StrongPass1!", "admin"]) == 0
    user = crud.get_user_by_email(db, "ada@example.com")
    assert user.role == "admin"
    # Second run with the same email fails cleanly.
    assert create_user.main(["Ada", "ada@example.com", "StrongPass1!"]) == 1


def test_initialize_database_seeds_once(db):
    initialize_database(seed=True)
    initialize_database(seed=True)
    campaigns = crud.find_campaigns(db)
    assert len(campaigns) == 1
    assert campaigns[0]["name"] == SAMPLE_CAMPAIGN["name"]
    assert campaigns[0]["accountIDs"] == ["123", "456"]


def test_initialize_database_without_seed(db):
    initialize_database(seed=False)
    assert crud.count_campaigns(db) == 0
