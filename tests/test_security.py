"""Security tests for tenant isolation over HTTP."""

from lifehub.extensions import db as _db
from lifehub.models.category import Category
from lifehub.models.organization import OrganizationMember


def select(client, organization_id):
    response = client.put('/api/tenancy', json={'organization_id': organization_id})
    assert response.status_code == 200


class TestTenantIsolation:

    def test_user_cannot_list_categories_of_other_user(
        self, authenticated_client1, authenticated_client2
    ):
        authenticated_client1.post('/api/finance/categories', json={'name': 'Mine'})

        response = authenticated_client2.get('/api/finance/categories')

        assert response.status_code == 200
        assert response.get_json()['categories'] == []

    def test_user_cannot_get_row_of_other_user(
        self, authenticated_client1, authenticated_client2
    ):
        created = authenticated_client1.post(
            '/api/finance/categories', json={'name': 'Mine'}
        ).get_json()['category']

        response = authenticated_client2.get(f"/api/finance/categories/{created['id']}")

        assert response.status_code == 404

    def test_user_cannot_delete_row_of_other_user(
        self, app, authenticated_client1, authenticated_client2
    ):
        created = authenticated_client1.post(
            '/api/finance/categories', json={'name': 'Mine'}
        ).get_json()['category']

        response = authenticated_client2.delete(f"/api/finance/categories/{created['id']}")

        assert response.status_code == 404
        with app.app_context():
            assert _db.session.get(Category, created['id']) is not None

    def test_organization_id_in_body_is_ignored(self, authenticated_client1, private_org):
        response = authenticated_client1.post(
            '/api/finance/categories',
            json={'name': 'Smuggled', 'organization_id': private_org}
        )

        assert response.status_code == 201
        assert response.get_json()['category']['organization_id'] is None

    def test_members_share_rows_of_selected_organization(
        self, authenticated_client1, authenticated_client2, shared_org
    ):
        select(authenticated_client1, shared_org)
        authenticated_client1.post('/api/finance/categories', json={'name': 'Groceries'})

        # Not visible from user2's personal tenancy
        assert authenticated_client2.get('/api/finance/categories').get_json()['categories'] == []

        select(authenticated_client2, shared_org)
        names = [
            c['name'] for c in authenticated_client2.get('/api/finance/categories').get_json()['categories']
        ]
        assert names == ['Groceries']

    def test_removed_member_loses_access(
        self, app, authenticated_client2, shared_org, user2
    ):
        select(authenticated_client2, shared_org)

        with app.app_context():
            OrganizationMember.query.filter_by(
                organization_id=shared_org, user_id=user2.id
            ).delete()
            _db.session.commit()

        response = authenticated_client2.get('/api/finance/categories')

        assert response.status_code == 403
        assert 'access' in response.get_json()['error']

    def test_removed_member_loses_access_to_cached_list(
        self, app, authenticated_client1, authenticated_client2, shared_org, user2
    ):
        select(authenticated_client1, shared_org)
        authenticated_client1.post('/api/finance/categories', json={'name': 'Groceries'})
        select(authenticated_client2, shared_org)
        warm = authenticated_client2.get('/api/finance/categories')
        assert [c['name'] for c in warm.get_json()['categories']] == ['Groceries']

        with app.app_context():
            OrganizationMember.query.filter_by(
                organization_id=shared_org, user_id=user2.id
            ).delete()
            _db.session.commit()

        response = authenticated_client2.get('/api/finance/categories')

        assert response.status_code == 403

    def test_deleted_organization_is_not_served_from_cache(
        self, authenticated_client1, authenticated_client2, shared_org
    ):
        select(authenticated_client1, shared_org)
        authenticated_client1.post('/api/finance/categories', json={'name': 'Groceries'})
        select(authenticated_client2, shared_org)
        assert len(authenticated_client2.get('/api/finance/categories').get_json()['categories']) == 1

        assert authenticated_client1.delete(f'/api/organizations/{shared_org}').status_code == 200

        # user2's session still selects the deleted organization
        response = authenticated_client2.get('/api/finance/categories')

        assert response.status_code == 403

    def test_removed_member_loses_access_to_cached_universe_episodes(
        self, app, authenticated_client1, authenticated_client2, shared_org, user2
    ):
        select(authenticated_client1, shared_org)
        universe = authenticated_client1.post(
            '/api/tv-shows/universes', json={'name': 'Household shows'}
        ).get_json()['universe']
        select(authenticated_client2, shared_org)
        url = f"/api/tv-shows/universes/{universe['id']}/episodes"
        assert authenticated_client2.get(url).status_code == 200

        with app.app_context():
            OrganizationMember.query.filter_by(
                organization_id=shared_org, user_id=user2.id
            ).delete()
            _db.session.commit()

        assert authenticated_client2.get(url).status_code == 403
        assert authenticated_client2.get(
            f"/api/tv-shows/universes/{universe['id']}/shows"
        ).status_code == 403

    def test_update_cannot_move_row_to_another_organization(
        self, authenticated_client1, private_org
    ):
        created = authenticated_client1.post(
            '/api/finance/categories', json={'name': 'Mine'}
        ).get_json()['category']

        response = authenticated_client1.put(
            f"/api/finance/categories/{created['id']}",
            json={'organization_id': private_org}
        )

        assert response.status_code == 400
        assert response.get_json()['field'] == 'organization_id'

    def test_wallet_created_in_organization_then_personal(
        self, authenticated_client1, shared_org
    ):
        select(authenticated_client1, shared_org)
        wallet = authenticated_client1.post(
            '/api/finance/wallets', json={'name': 'Shared'}
        ).get_json()['wallet']
        assert wallet['organization_id'] == shared_org

        select(authenticated_client1, 'personal')
        wallet = authenticated_client1.post(
            '/api/finance/wallets', json={'name': 'Own'}
        ).get_json()['wallet']
        assert wallet['organization_id'] is None

    def test_api_without_session_is_unauthorized(self, client):
        response = client.get('/api/finance/wallets')

        assert response.status_code == 401


class TestOrganizations:

    def test_create_selects_new_organization(self, authenticated_client1):
        response = authenticated_client1.post('/api/organizations', json={'name': 'Club'})

        assert response.status_code == 201
        data = response.get_json()
        assert data['tenancy']['tenancy_id'] == data['organization']['id']
        assert authenticated_client1.get('/api/tenancy').get_json()['organization']['name'] == 'Club'

    def test_create_requires_name(self, authenticated_client1):
        response = authenticated_client1.post('/api/organizations', json={'name': '  '})

        assert response.status_code == 400
        assert response.get_json()['field'] == 'name'

    def test_lists_only_memberships(self, authenticated_client1, shared_org, private_org):
        organizations = authenticated_client1.get('/api/organizations').get_json()['organizations']

        assert [o['id'] for o in organizations] == [shared_org]

    def test_member_cannot_rename(self, authenticated_client2, shared_org):
        response = authenticated_client2.put(
            f'/api/organizations/{shared_org}', json={'name': 'Taken over'}
        )

        assert response.status_code == 403

    def test_rename_refreshes_selected_snapshot(self, authenticated_client1, shared_org):
        select(authenticated_client1, shared_org)

        authenticated_client1.put(f'/api/organizations/{shared_org}', json={'name': 'Home'})

        assert authenticated_client1.get('/api/tenancy').get_json()['organization']['name'] == 'Home'

    def test_delete_selected_falls_back_to_personal(self, app, authenticated_client1, shared_org):
        select(authenticated_client1, shared_org)
        authenticated_client1.post('/api/finance/categories', json={'name': 'Shared'})

        response = authenticated_client1.delete(f'/api/organizations/{shared_org}')

        assert response.status_code == 200
        assert response.get_json()['tenancy']['mode'] == 'personal'
        with app.app_context():
            assert Category.query.filter_by(organization_id=shared_org).count() == 0
