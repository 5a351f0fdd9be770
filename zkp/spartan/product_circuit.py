"""
곱 회로 논증 (Product-Circuit / Grand-Product Argument)
=========================================================

길이 n (2의 거듭제곱) 벡터의 전체 곱을, n개 잎(leaf)을 드러내지 않고
log₂ n 개의 레이어로 증명한다.

**회로 구조**:
  out[i] = in[i] · in[i + n/2]   (왼쪽 절반 × 오른쪽 절반)

  레이어를 반복하면 길이 1의 루트(전체 곱)에 도달한다.
  입력의 최상위 비트가 "왼쪽/오른쪽"을 고르므로 다음이 성립한다.

    out~(r) = Σ_x eq(r, x) · L(x) · R(x)
    in~(r_layer, r) = L~(r) + r_layer · (R~(r) − L~(r))

**레이어별 검증 (루트에서 잎 방향)**:
  1. 마지막 레이어라면 내적 회로 주장(claims_dotp)을 주장 목록에 추가
  2. 주장마다 결합 계수를 뽑아 target = Σ coeff·claim
  3. 레이어 폭(i 변수)에 대한 3차 합검사 → 점 r, 최종값
  4. 기대값 Σ coeffᵢ·leftᵢ·rightᵢ·eq(r, rands) (+ 내적 항)과 최종값 비교
  5. r_layer를 뽑아 주장을 left + r_layer·(right − left)로 줄이고
     rands = [r_layer] + r

**내적 회로 (Dot-Product Circuit)**:
  희소 행렬 평가 Σⱼ row[j]·col[j]·val[j] 를 같은 마지막 레이어의 합검사에
  태운다. 행렬마다 왼쪽/오른쪽 절반 두 개의 회로가 있고, 두 주장의 합이
  행렬 평가값이다. eq 인자 없이 평문 합으로 들어간다.

사용 예시:
    >>> circuit = ProductCircuit([FR(i + 1) for i in range(8)])
    >>> proof, claims, _, rands = product_circuit_eval_prove([circuit], [], t)
    >>> product_circuit_eval_verify(proof, [circuit.evaluate()], [], 8, t2)
"""

from zkp.spartan.errors import require, require_shape
from zkp.spartan.field import FR
from zkp.spartan.polynomial import eval_eq, eval_eq_x_y, log2
from zkp.spartan.proof import LayerProof, ProductCircuitEvalProof
from zkp.spartan.sumcheck import sum_check_cubic_prove, sum_check_cubic_verify


class ProductCircuit:
    """이진 곱셈 트리.

    속성:
        left_vec[k], right_vec[k]: 잎에서 k번째 레이어의 왼쪽/오른쪽 절반
        root: 전체 곱
    """

    def __init__(self, leaves):
        log2(len(leaves))
        self.left_vec = []
        self.right_vec = []
        layer = list(leaves)
        while len(layer) > 1:
            half = len(layer) // 2
            left, right = layer[:half], layer[half:]
            self.left_vec.append(left)
            self.right_vec.append(right)
            layer = [l * r for l, r in zip(left, right)]
        self.root = layer[0]

    @property
    def num_layers(self):
        return len(self.left_vec)

    def evaluate(self):
        return self.root


class DotProductCircuit:
    """Σⱼ row[j]·col[j]·val[j]."""

    def __init__(self, row, col, val):
        if not (len(row) == len(col) == len(val)):
            raise ValueError("내적 회로 벡터 길이가 서로 다릅니다")
        self.row = list(row)
        self.col = list(col)
        self.val = list(val)

    def evaluate(self):
        total = FR(0)
        for r, c, v in zip(self.row, self.col, self.val):
            total = total + r * c * v
        return total


def product_circuit_eval_prove(circuits, dotp_circuits, transcript):
    """여러 곱 회로(와 선택적 내적 회로)를 한꺼번에 증명한다.

    Args:
        circuits: 같은 크기의 ProductCircuit 리스트
        dotp_circuits: 마지막 레이어 폭과 같은 길이의 DotProductCircuit 리스트

    Returns:
        (ProductCircuitEvalProof, 잎 주장 리스트, 내적 주장 리스트, rands)
    """
    num_layers = circuits[0].num_layers
    rands = []
    layers = []
    claims = []
    claims_dotp = []
    dotp_row, dotp_col, dotp_val = (), (), ()

    for i in range(num_layers):
        k = num_layers - 1 - i
        last = i == num_layers - 1
        num_claims = len(circuits) + (len(dotp_circuits) if last else 0)
        coeffs = transcript.challenge_vector(b"rand_coeffs_next_layer", num_claims)

        eq_table = eval_eq(rands)
        terms = [
            (coeffs[idx], [list(eq_table), list(c.left_vec[k]), list(c.right_vec[k])])
            for idx, c in enumerate(circuits)
        ]
        if last:
            offset = len(circuits)
            terms.extend(
                (coeffs[offset + idx], [list(d.row), list(d.col), list(d.val)])
                for idx, d in enumerate(dotp_circuits)
            )

        polys, r, terms = sum_check_cubic_prove(i, terms, transcript)

        claim_prod_left = [terms[idx][1][1][0] for idx in range(len(circuits))]
        claim_prod_right = [terms[idx][1][2][0] for idx in range(len(circuits))]
        for left, right in zip(claim_prod_left, claim_prod_right):
            transcript.append_scalar(b"claim_prod_left", left)
            transcript.append_scalar(b"claim_prod_right", right)

        if last:
            dotp_terms = terms[len(circuits):]
            dotp_row = tuple(vecs[0][0] for _, vecs in dotp_terms)
            dotp_col = tuple(vecs[1][0] for _, vecs in dotp_terms)
            dotp_val = tuple(vecs[2][0] for _, vecs in dotp_terms)
            for row, col, val in zip(dotp_row, dotp_col, dotp_val):
                transcript.append_scalar(b"claim_dotp_row", row)
                transcript.append_scalar(b"claim_dotp_col", col)
                transcript.append_scalar(b"claim_dotp_val", val)

        r_layer = transcript.challenge_scalar(b"challenge_r_layer")
        claims = [l + r_layer * (rt - l) for l, rt in zip(claim_prod_left, claim_prod_right)]
        if last:
            claims_dotp = _reduce_dotp_claims(dotp_row, dotp_col, dotp_val, r_layer)

        layers.append(LayerProof(
            polys=tuple(polys),
            claim_prod_left=tuple(claim_prod_left),
            claim_prod_right=tuple(claim_prod_right),
        ))
        rands = [r_layer] + r

    proof = ProductCircuitEvalProof(
        layers_proof=tuple(layers),
        claim_dotp_row=dotp_row,
        claim_dotp_col=dotp_col,
        claim_dotp_val=dotp_val,
    )
    return proof, claims, claims_dotp, rands


def _reduce_dotp_claims(rows, cols, vals, r_layer):
    """왼쪽/오른쪽 절반 주장 쌍을 하나로 합쳐 (row, col, val) 순서로 나열한다."""
    reduced = []
    for i in range(len(rows) // 2):
        for vec in (rows, cols, vals):
            left, right = vec[2 * i], vec[2 * i + 1]
            reduced.append(left + r_layer * (right - left))
    return reduced


def product_circuit_eval_verify(proof, claims_prod_circuit, claims_dotp_circuit, n, transcript):
    """곱 회로 논증을 검증한다.

    Args:
        proof: ProductCircuitEvalProof
        claims_prod_circuit: 각 곱 회로의 루트 주장
        claims_dotp_circuit: 내적 회로 주장 (없으면 빈 리스트)
        n: 잎 개수

    Returns:
        (claims, claims_dotp, rands): 잎 다항식들의 rands 점에서의 주장

    Raises:
        MalformedProof: 레이어 수나 주장 개수가 맞지 않을 때
        CryptographicCheckFailed: 어느 레이어의 기대값이 맞지 않을 때
    """
    num_layers = log2(n)
    require_shape(
        len(proof.layers_proof) == num_layers,
        f"곱 회로 레이어 수 {len(proof.layers_proof)} != {num_layers}",
    )
    num_dotp = len(claims_dotp_circuit)
    require_shape(
        len(proof.claim_dotp_row) == num_dotp
        and len(proof.claim_dotp_col) == num_dotp
        and len(proof.claim_dotp_val) == num_dotp,
        "내적 회로 주장 개수가 맞지 않습니다",
    )

    claims = list(claims_prod_circuit)
    claims_dotp = []
    rands = []
    for i, layer in enumerate(proof.layers_proof):
        last = i == num_layers - 1
        if last:
            claims.extend(claims_dotp_circuit)

        coeffs = transcript.challenge_vector(b"rand_coeffs_next_layer", len(claims))
        claim = FR(0)
        for coeff, c in zip(coeffs, claims):
            claim = claim + coeff * c

        r, claim_final = sum_check_cubic_verify(layer.polys, i, claim, transcript)

        left, right = layer.claim_prod_left, layer.claim_prod_right
        require_shape(
            len(left) == len(right) == len(claims_prod_circuit),
            "레이어 왼쪽/오른쪽 주장 개수가 회로 개수와 다릅니다",
        )
        for l, rt in zip(left, right):
            transcript.append_scalar(b"claim_prod_left", l)
            transcript.append_scalar(b"claim_prod_right", rt)

        eq = eval_eq_x_y(r, rands)
        expected = FR(0)
        for coeff, l, rt in zip(coeffs, left, right):
            expected = expected + coeff * l * rt * eq

        if last:
            offset = len(left)
            for j, (row, col, val) in enumerate(zip(
                proof.claim_dotp_row, proof.claim_dotp_col, proof.claim_dotp_val
            )):
                transcript.append_scalar(b"claim_dotp_row", row)
                transcript.append_scalar(b"claim_dotp_col", col)
                transcript.append_scalar(b"claim_dotp_val", val)
                expected = expected + coeffs[offset + j] * row * col * val

        require(expected == claim_final, "product-layer")

        r_layer = transcript.challenge_scalar(b"challenge_r_layer")
        claims = [l + r_layer * (rt - l) for l, rt in zip(left, right)]
        if last:
            claims_dotp = _reduce_dotp_claims(
                proof.claim_dotp_row, proof.claim_dotp_col, proof.claim_dotp_val, r_layer
            )
        rands = [r_layer] + r

    return claims, claims_dotp, rands
