"""
Tests for patient endpoints.
"""
MARIA = {
    "nome": "Maria Silva",
    "dataDeNascimento": "1990-01-15",
    "cartaoCidadao": "12345678",
    "telefone": "912345678",
    "email": "maria@email.com",
}


# =============================================================================
# CREATE
# =============================================================================

def test_create_patient_success(client):
    """Creating Maria Silva echoes every field plus a generated id."""
    response = client.post("/patients", json=MARIA)
    assert response.status_code == 201
    data = response.json()
    assert isinstance(data["id"], int)
    for key, value in MARIA.items():
        assert data[key] == value


def test_create_patient_duplicate_civil_id(client, maria):
    """A second patient with the same civil ID is rejected with 409."""
    response = client.post("/patients", json={**MARIA, "nome": "Outra Pessoa"})
    assert response.status_code == 409
    data = response.json()
    assert data["status"] == 409
    assert data["error"] == "Conflict"
    assert data["message"] == "Já existe paciente com este Cartão de Cidadão"
    assert "campos" not in data
    assert data["timestamp"].endswith("Z")


def test_create_patient_without_email(client):
    """E-mail is optional."""
    body = {k: v for k, v in MARIA.items() if k != "email"}
    response = client.post("/patients", json=body)
    assert response.status_code == 201
    assert response.json()["email"] is None


def test_create_patient_missing_name(client):
    """A missing required field is reported under its JSON key."""
    body = {k: v for k, v in MARIA.items() if k != "nome"}
    response = client.post("/patients", json=body)
    assert response.status_code == 400
    data = response.json()
    assert data["error"] == "Bad Request"
    assert data["message"] == "Erro de validação"
    assert data["campos"] == {"nome": "Nome é obrigatório"}


def test_create_patient_blank_name(client):
    """Whitespace-only names are rejected."""
    response = client.post("/patients", json={**MARIA, "nome": "   "})
    assert response.status_code == 400
    assert response.json()["campos"] == {"nome": "Nome não pode estar vazio"}


def test_create_patient_invalid_civil_id_and_phone(client):
    """Every invalid field gets its own reason."""
    response = client.post(
        "/patients",
        json={**MARIA, "cartaoCidadao": "1234", "telefone": "812345678"}
    )
    assert response.status_code == 400
    campos = response.json()["campos"]
    assert campos["cartaoCidadao"] == "Cartão de Cidadão deve ter exatamente 8 dígitos"
    assert campos["telefone"] == "Telefone deve ter 9 dígitos começando com 9"


def test_create_patient_invalid_birth_date(client):
    response = client.post("/patients", json={**MARIA, "dataDeNascimento": "15/01/1990"})
    assert response.status_code == 400
    assert "dataDeNascimento" in response.json()["campos"]


def test_create_patient_null_body(client):
    """An empty object reports every required field."""
    response = client.post("/patients", json={})
    assert response.status_code == 400
    campos = response.json()["campos"]
    assert set(campos) == {"nome", "dataDeNascimento", "cartaoCidadao", "telefone"}
    assert campos["cartaoCidadao"] == "Número do CC é obrigatório"


def test_response_carries_request_id(client):
    response = client.get("/patients")
    assert response.headers.get("X-Request-ID")


# =============================================================================
# READ
# =============================================================================

def test_get_patient(client, maria):
    response = client.get(f"/patients/{maria['id']}")
    assert response.status_code == 200
    assert response.json() == maria


def test_get_patient_not_found(client):
    response = client.get("/patients/999999")
    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "Not Found"
    assert data["message"] == "Paciente não encontrado com ID: 999999"


def test_get_patient_non_numeric_id(client):
    response = client.get("/patients/abc")
    assert response.status_code == 400
    assert "patient_id" in response.json()["campos"]


# =============================================================================
# LIST
# =============================================================================

def test_list_patients_empty(client):
    """An empty table gives an empty first and last page."""
    response = client.get("/patients")
    assert response.status_code == 200
    data = response.json()
    assert data["content"] == []
    assert data["totalElements"] == 0
    assert data["totalPages"] == 0
    assert data["number"] == 0
    assert data["size"] == 20
    assert data["first"] is True
    assert data["last"] is True
    assert data["empty"] is True


def test_list_patients_summary_has_no_id(client, maria):
    data = client.get("/patients").json()
    assert data["content"] == [{k: v for k, v in maria.items() if k != "id"}]


def test_list_patients_paging(client, make_patient):
    """Five patients at size 2 give three pages."""
    for i in range(5):
        make_patient(name=f"Paciente {i}")

    data = client.get("/patients", params={"page": 1, "size": 2}).json()
    assert data["totalElements"] == 5
    assert data["totalPages"] == 3
    assert data["number"] == 1
    assert data["numberOfElements"] == 2
    assert data["first"] is False
    assert data["last"] is False
    assert [p["nome"] for p in data["content"]] == ["Paciente 2", "Paciente 3"]

    last = client.get("/patients", params={"page": 2, "size": 2}).json()
    assert last["numberOfElements"] == 1
    assert last["last"] is True


def test_list_patients_page_past_end(client, make_patient):
    make_patient()
    data = client.get("/patients", params={"page": 5}).json()
    assert data["content"] == []
    assert data["totalElements"] == 1
    assert data["empty"] is True


def test_list_patients_sort_descending(client, make_patient):
    make_patient(name="Ana")
    make_patient(name="Carlos")
    make_patient(name="Beatriz")

    data = client.get("/patients", params={"sort": "nome,desc"}).json()
    assert [p["nome"] for p in data["content"]] == ["Carlos", "Beatriz", "Ana"]


def test_list_patients_invalid_sort(client):
    response = client.get("/patients", params={"sort": "altura"})
    assert response.status_code == 400
    assert response.json()["error"] == "Bad Request"


def test_list_patients_invalid_size(client):
    response = client.get("/patients", params={"size": 0})
    assert response.status_code == 400
    assert "size" in response.json()["campos"]


def test_list_patients_filter_by_name_ignores_case(client, maria, make_patient):
    make_patient(name="João Santos")
    data = client.get("/patients", params={"name": "MARIA SILVA"}).json()
    assert data["totalElements"] == 1
    assert data["content"][0]["cartaoCidadao"] == MARIA["cartaoCidadao"]


def test_list_patients_filter_by_civil_id(client, maria, make_patient):
    make_patient()
    data = client.get("/patients", params={"civilId": "12345678"}).json()
    assert data["totalElements"] == 1
    assert data["content"][0]["nome"] == "Maria Silva"


def test_list_patients_filter_by_name_and_civil_id(client, maria, make_patient):
    """Name and civil ID together must both match."""
    make_patient(name="Maria Silva")
    data = client.get(
        "/patients",
        params={"name": "maria silva", "civilId": "12345678"}
    ).json()
    assert data["totalElements"] == 1

    data = client.get(
        "/patients",
        params={"name": "maria silva", "civilId": "00000000"}
    ).json()
    assert data["totalElements"] == 0


def test_list_patients_filter_by_birth_date(client, maria, make_patient):
    make_patient()
    data = client.get("/patients", params={"birthDate": "1990-01-15"}).json()
    assert data["totalElements"] == 1
    assert data["content"][0]["nome"] == "Maria Silva"


def test_list_patients_name_takes_precedence_over_birth_date(client, maria):
    """Only the highest-precedence filter is applied."""
    data = client.get(
        "/patients",
        params={"name": "Maria Silva", "birthDate": "2000-01-01"}
    ).json()
    assert data["totalElements"] == 1


def test_list_patients_invalid_birth_date_filter(client):
    response = client.get("/patients", params={"birthDate": "ontem"})
    assert response.status_code == 400
    assert "birthDate" in response.json()["campos"]


# =============================================================================
# UPDATE
# =============================================================================

def test_update_patient(client, maria):
    body = {**MARIA, "telefone": "919999999", "email": None}
    response = client.put(f"/patients/{maria['id']}", json=body)
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == maria["id"]
    assert data["telefone"] == "919999999"
    assert data["email"] is None


def test_update_patient_not_found(client):
    response = client.put("/patients/999999", json=MARIA)
    assert response.status_code == 404
    assert client.get("/patients").json()["totalElements"] == 0


def test_update_patient_to_taken_civil_id(client, maria, make_patient):
    other = make_patient()
    response = client.put(f"/patients/{other.id}", json=MARIA)
    assert response.status_code == 409
    assert response.json()["message"] == "Já existe paciente com este Cartão de Cidadão"


def test_update_patient_validation(client, maria):
    response = client.put(f"/patients/{maria['id']}", json={**MARIA, "telefone": "123"})
    assert response.status_code == 400
    assert "telefone" in response.json()["campos"]


# =============================================================================
# DELETE
# =============================================================================

def test_delete_patient(client, maria):
    response = client.delete(f"/patients/{maria['id']}")
    assert response.status_code == 204
    assert response.content == b""

    assert client.get(f"/patients/{maria['id']}").status_code == 404
    assert client.delete(f"/patients/{maria['id']}").status_code == 404


def test_delete_patient_removes_exams(client, maria):
    exam = client.post(
        "/exams",
        json={
            "nome": "Hemograma Completo",
            "descricao": "Análise completa do sangue",
            "preco": 35.0,
            "pacienteId": maria["id"],
        }
    ).json()

    assert client.delete(f"/patients/{maria['id']}").status_code == 204
    assert client.get(f"/exams/{exam['id']}").status_code == 404


def test_delete_patient_conflict_keeps_data(client, maria, exam_added_during_delete):
    """A delete refused by the store returns 409 and changes nothing."""
    exam = client.post(
        "/exams",
        json={"nome": "Hemograma", "descricao": "Sangue", "preco": 10.0, "pacienteId": maria["id"]}
    ).json()

    response = client.delete(f"/patients/{maria['id']}")
    assert response.status_code == 409
    assert response.json()["error"] == "Conflict"

    assert client.get(f"/patients/{maria['id']}").status_code == 200
    assert client.get(f"/exams/{exam['id']}").status_code == 200
    assert client.get("/exams").json()["totalElements"] == 1


# =============================================================================
# OUT-OF-RANGE NUMBERS
# =============================================================================

def test_patient_id_beyond_integer_range(client):
    """Ids SQLite cannot store are rejected as invalid, never a server error."""
    for method in ("get", "delete"):
        response = getattr(client, method)("/patients/99999999999999999999")
        assert response.status_code == 400
        assert "patient_id" in response.json()["campos"]

    response = client.put("/patients/99999999999999999999", json=MARIA)
    assert response.status_code == 400


def test_largest_patient_id_is_not_found(client):
    response = client.get(f"/patients/{2**63 - 1}")
    assert response.status_code == 404


def test_page_beyond_integer_range(client):
    response = client.get("/patients", params={"page": 10**18})
    assert response.status_code == 400
    assert "page" in response.json()["campos"]
