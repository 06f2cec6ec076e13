"""
Unit Tests for the public beneficiary registration endpoint
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from scholarship.models import AcademicDetails, BeneficiaryDocument, BeneficiaryRegistration

from conftest import document_files, registration_fields

MANDATORY_FIELDS = ('aadharCard', 'passportSizePhoto', 'houseImage')


async def count(db, model):
    return await db.scalar(select(func.count()).select_from(model))


class TestBeneficiaryRegister:

    @pytest.mark.asyncio
    async def test_register_with_mandatory_documents(self, client: AsyncClient, db_session):
        """Beneficiary references a document record with the three mandatory URLs"""
        response = await client.post(
            '/api/beneficiary-register',
            data=registration_fields(),
            files=document_files(MANDATORY_FIELDS),
        )

        assert response.status_code == 201
        body = response.json()
        assert body['message'] == 'Beneficiary registered successfully!'
        assert body['data']['mobileNumber'] == '9876543210'
        assert body['data']['email'] == 'student.test@example.com'

        beneficiary = await db_session.get(BeneficiaryRegistration, body['data']['id'])
        document = await db_session.get(BeneficiaryDocument, beneficiary.document_id)
        assert document.aadhar_card and document.passport_size_photo and document.house_image
        assert document.pan_card is None

        academic = (await db_session.execute(
            select(AcademicDetails).where(AcademicDetails.beneficiary_id == beneficiary.id)
        )).scalar_one()
        assert academic.academic_year == 2024
        assert academic.course_name == 'B.Tech Computer Science'

    @pytest.mark.asyncio
    async def test_optional_documents_stored_when_present(self, client: AsyncClient, storage):
        response = await client.post(
            '/api/beneficiary-register',
            data=registration_fields(),
            files=document_files(MANDATORY_FIELDS + ('panCard', 'incomeCertificate')),
        )

        assert response.status_code == 201
        documents = response.json()['documents']
        assert documents['panCard'] and documents['incomeCertificate']
        assert documents['rationCard'] is None
        assert len(storage.uploaded) == 5

    @pytest.mark.asyncio
    async def test_missing_house_image_rejected(self, client: AsyncClient, db_session, storage):
        response = await client.post(
            '/api/beneficiary-register',
            data=registration_fields(),
            files=document_files(('aadharCard', 'passportSizePhoto')),
        )

        assert response.status_code == 400
        assert 'houseImage' in response.json()['msg']
        assert await count(db_session, BeneficiaryRegistration) == 0
        assert storage.uploaded == []

    @pytest.mark.asyncio
    async def test_invalid_fields_rejected_before_upload(self, client: AsyncClient, db_session, storage):
        response = await client.post(
            '/api/beneficiary-register',
            data=registration_fields(mobileNumber='12345', pinCode='1234567'),
            files=document_files(MANDATORY_FIELDS),
        )

        assert response.status_code == 400
        fields = {error['field'] for error in response.json()['errors']}
        assert fields == {'mobileNumber', 'pinCode'}
        assert storage.uploaded == []
        assert await count(db_session, BeneficiaryRegistration) == 0

    @pytest.mark.asyncio
    async def test_unknown_file_field_rejected(self, client: AsyncClient, storage):
        response = await client.post(
            '/api/beneficiary-register',
            data=registration_fields(),
            files=document_files(MANDATORY_FIELDS + ('selfie',)),
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'UNEXPECTED_FILE_FIELD'
        assert storage.uploaded == []

    @pytest.mark.asyncio
    async def test_disallowed_file_type_rejected(self, client: AsyncClient):
        files = document_files(MANDATORY_FIELDS)
        files['houseImage'] = ('house.exe', b'MZ binary', 'application/octet-stream')

        response = await client.post('/api/beneficiary-register', data=registration_fields(), files=files)

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_FILE_TYPE'

    @pytest.mark.asyncio
    async def test_upload_failure_returns_server_error_and_cleans_up(
        self, client: AsyncClient, db_session, storage
    ):
        storage.fail_filenames.add('houseImage.pdf')

        response = await client.post(
            '/api/beneficiary-register',
            data=registration_fields(),
            files=document_files(MANDATORY_FIELDS),
        )

        assert response.status_code == 500
        assert response.json() == {'error': 'Server error during registration or file upload'}
        assert await count(db_session, BeneficiaryDocument) == 0
        assert await count(db_session, BeneficiaryRegistration) == 0
        assert sorted(storage.deleted) == sorted(storage.uploaded)

    @pytest.mark.asyncio
    async def test_token_links_registration_to_user(self, client: AsyncClient, db_session, test_user, auth_headers):
        response = await client.post(
            '/api/beneficiary-register',
            data=registration_fields(),
            files=document_files(MANDATORY_FIELDS),
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()['data']['userId'] == test_user.id

    @pytest.mark.asyncio
    async def test_uploaded_document_is_served(self, client: AsyncClient):
        response = await client.post(
            '/api/beneficiary-register',
            data=registration_fields(),
            files=document_files(MANDATORY_FIELDS),
        )
        url = response.json()['documents']['aadharCard']

        served = await client.get(url.replace('http://test', ''))

        assert served.status_code == 200
        assert served.content.startswith(b'%PDF')

    @pytest.mark.asyncio
    async def test_name_longer_than_column_rejected(self, client: AsyncClient, db_session, storage):
        response = await client.post(
            '/api/beneficiary-register',
            data=registration_fields(firstName='a' * 150),
            files=document_files(MANDATORY_FIELDS),
        )

        assert response.status_code == 400
        assert response.json()['errors'][0]['field'] == 'firstName'
        assert storage.uploaded == []
        assert await count(db_session, BeneficiaryRegistration) == 0
